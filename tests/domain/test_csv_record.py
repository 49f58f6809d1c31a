from enum import Enum
from types import MappingProxyType

import pytest

from csvrecord.domain.exceptions import (
    IndexOutOfRangeError,
    InconsistentRecordError,
    MissingMappingError,
    UnknownNameError,
)
from csvrecord.domain.record import CsvRecord


class Column(Enum):
    x = "first"
    y = "second"


def _record(values, mapping=None, **kwargs) -> CsvRecord:
    return CsvRecord(values=values, mapping=mapping, **kwargs)


def test_none_values_normalize_to_empty_tuple():
    record = _record(None, {"a": 0})
    assert record.values == ()
    assert record.size() == 0
    assert len(record) == 0
    assert record.is_consistent() is False


def test_empty_record_without_mapping_is_consistent():
    record = _record([])
    assert record.size() == 0
    assert record.is_consistent() is True


def test_values_are_copied_into_tuple():
    source = ["a", "b"]
    record = _record(source)
    source.append("c")
    assert record.values == ("a", "b")


def test_no_mapping_name_access_fails():
    record = _record(["a", "b"])
    with pytest.raises(MissingMappingError):
        record.get_by_name("a")
    assert record.is_mapped("a") is False
    assert record.is_set("a") is False
    assert record.to_ordered_map() == {}


def test_unknown_name_lists_known_names():
    record = _record(["a", "b"], {"x": 0, "y": 1})
    with pytest.raises(UnknownNameError) as excinfo:
        record.get_by_name("nope")
    assert excinfo.value.known_names == ["x", "y"]
    assert "nope" in str(excinfo.value)
    assert "['x', 'y']" in str(excinfo.value)


def test_mapped_names_match_positions():
    mapping = {"x": 0, "y": 1, "z": 2}
    record = _record(["a", "b", "c"], mapping)
    for name, index in mapping.items():
        assert record.get_by_name(name) == record.get_by_index(index)
        assert record.is_set(name)
    assert record.is_consistent()


def test_inconsistent_record_scenario():
    record = _record(["a", "b", "c"], {"x": 0, "y": 1, "z": 5})

    assert record.is_consistent() is False
    assert record.get_by_name("y") == "b"
    with pytest.raises(InconsistentRecordError) as excinfo:
        record.get_by_name("z")
    assert excinfo.value.name == "z"
    assert excinfo.value.index == 5
    assert excinfo.value.size == 3
    assert record.is_mapped("z") is True
    assert record.is_set("z") is False
    assert record.to_ordered_map() == {"x": "a", "y": "b"}


def test_negative_mapped_index_does_not_wrap():
    record = _record(["a", "b"], {"x": 0, "neg": -1})

    assert record.is_consistent() is False
    assert record.is_mapped("neg") is True
    assert record.is_set("neg") is False
    with pytest.raises(InconsistentRecordError) as excinfo:
        record.get_by_name("neg")
    assert excinfo.value.index == -1
    assert record.to_ordered_map() == {"x": "a"}
    assert record.put_in({}) == {"x": "a"}



def test_short_row_against_longer_header():
    record = _record(["1"], {"id": 0, "name": 1})
    assert record.is_consistent() is False
    assert record.get_by_name("id") == "1"
    with pytest.raises(InconsistentRecordError):
        record.get_by_name("name")


def test_empty_record_metadata_and_rendering():
    record = _record([], comment="hi", record_number=3)
    assert record.size() == 0
    text = str(record)
    assert "hi" in text
    assert "3" in text
    with pytest.raises(IndexOutOfRangeError):
        record.get_by_index(0)


def test_str_contains_mapping_and_values():
    record = _record(["a"], MappingProxyType({"x": 0}), record_number=7)
    assert str(record) == "CsvRecord [comment=None, mapping={'x': 0}, recordNumber=7, values=['a']]"


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_get_by_index_rejects_out_of_range(index):
    record = _record(["a", "b"])
    with pytest.raises(IndexOutOfRangeError) as excinfo:
        record.get_by_index(index)
    assert isinstance(excinfo.value, IndexError)
    assert excinfo.value.size == 2


def test_to_ordered_map_is_independent_copy():
    mapping = {"x": 0, "y": 1}
    record = _record(["a", "b"], mapping)
    result = record.to_ordered_map()
    result["x"] = "changed"
    result["extra"] = "new"
    assert record.get_by_name("x") == "a"
    assert record.to_ordered_map() == {"x": "a", "y": "b"}
    assert mapping == {"x": 0, "y": 1}


def test_to_ordered_map_follows_mapping_order():
    record = _record(["a", "b", "c"], {"z": 2, "x": 0, "y": 1})
    assert list(record.to_ordered_map()) == ["z", "x", "y"]


def test_put_in_fills_given_mapping():
    record = _record(["a", "b"], {"x": 0, "y": 1, "z": 4})
    target = {"keep": "me"}
    assert record.put_in(target) is target
    assert target == {"keep": "me", "x": "a", "y": "b"}


def test_mapping_is_shared_not_copied():
    header = MappingProxyType({"x": 0})
    first = _record(["a"], header)
    second = _record(["b"], header)
    assert first.mapping is header
    assert second.mapping is header


def test_iteration_is_restartable():
    record = _record(["a", "b", "c"], {"x": 0})
    assert list(record) == ["a", "b", "c"]
    assert list(record) == ["a", "b", "c"]
    assert [v for v in record] == list(record.values)


def test_get_dispatches_by_key_type():
    record = _record(["a", "b"], {"x": 0, "y": 1})
    assert record.get(1) == "b"
    assert record.get("x") == "a"
    assert record.get(Column.y) == "b"
    assert record["y"] == "b"
    assert record[0] == "a"
    with pytest.raises(TypeError):
        record.get(1.5)
    with pytest.raises(TypeError):
        record[True]
    with pytest.raises(TypeError):
        record.get(False)


def test_get_by_enum_uses_member_name():
    record = _record(["a", "b"], {"x": 0, "y": 1})
    assert record.get_by_enum(Column.x) == "a"


def test_record_is_frozen():
    record = _record(["a"])
    with pytest.raises(AttributeError):
        record.comment = "changed"


def test_none_values_are_kept_as_fields():
    record = _record(["a", None], {"x": 0, "y": 1})
    assert record.get_by_name("y") is None
    assert record.is_set("y") is True
    assert record.to_ordered_map() == {"x": "a", "y": None}


def test_to_dict_snapshot():
    record = _record(["a", "b"], {"x": 0, "z": 9}, comment="note", record_number=2, character_position=14)
    assert record.to_dict() == {
        "record_number": 2,
        "character_position": 14,
        "comment": "note",
        "values": ["a", "b"],
        "fields": {"x": "a"},
    }
