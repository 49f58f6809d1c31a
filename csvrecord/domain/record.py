from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, MutableMapping, TypeVar

from csvrecord.domain.exceptions import (
    IndexOutOfRangeError,
    InconsistentRecordError,
    MissingMappingError,
    UnknownNameError,
)

M = TypeVar("M", bound=MutableMapping[str, Any])


@dataclass(frozen=True)
class CsvRecord:
    """
    Назначение/ответственность:
        Одна строка табличных данных: значения полей + метаданные источника.
        Доступ к полям по позиции и (при наличии заголовка) по имени.

    Инварианты/гарантии:
        - values всегда tuple; None нормализуется в пустой tuple.
        - mapping принадлежит источнику (обычно общий заголовок) и разделяется
          по ссылке между записями; запись его не копирует и не изменяет.
        - Индексы mapping не проверяются при создании. Несогласованная запись
          (размеры расходятся или индекс вне [0, size())) допустима и проявляется только при
          обращении к "битому" имени.
    """

    values: tuple[str | None, ...] = ()
    mapping: Mapping[str, int] | None = None
    comment: str | None = None
    record_number: int = 0
    character_position: int = 0

    def __post_init__(self) -> None:
        values = () if self.values is None else tuple(self.values)
        object.__setattr__(self, "values", values)

    @staticmethod
    def builder() -> CsvRecordBuilder:
        return CsvRecordBuilder()

    def size(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[str | None]:
        return iter(self.values)

    def get_by_index(self, index: int) -> str | None:
        """
        Назначение:
            Позиционный доступ к значению.

        Поведение:
            - Отрицательные индексы не поддерживаются (без "оборота" с конца).
            - Вне [0, size()) -> IndexOutOfRangeError.
        """
        if not self._in_range(index):
            raise IndexOutOfRangeError(index=index, size=len(self.values))
        return self.values[index]

    def get_by_name(self, name: str) -> str | None:
        """
        Назначение:
            Доступ к значению по имени колонки.

        Входные данные:
            name: str
                Имя колонки из заголовка.

        Выходные данные:
            str | None
                Значение поля (None, если источник подставил null_string).

        Поведение:
            - mapping отсутствует -> MissingMappingError.
            - имя не найдено -> UnknownNameError (со списком известных имён).
            - индекс имени вне [0, size()) -> InconsistentRecordError.
        """
        if self.mapping is None:
            raise MissingMappingError(record_number=self.record_number)
        index = self.mapping.get(name)
        if index is None:
            raise UnknownNameError(name=name, known_names=list(self.mapping.keys()))
        if not self._in_range(index):
            raise InconsistentRecordError(name=name, index=index, size=len(self.values))
        return self.values[index]

    def get_by_enum(self, member: Enum) -> str | None:
        return self.get_by_name(member.name)

    def get(self, key: int | str | Enum) -> str | None:
        if isinstance(key, Enum):
            return self.get_by_enum(key)
        if isinstance(key, bool):
            raise TypeError("Boolean keys are not supported")
        if isinstance(key, int):
            return self.get_by_index(key)
        if isinstance(key, str):
            return self.get_by_name(key)
        raise TypeError(f"Unsupported key type: {type(key).__name__}")

    __getitem__ = get

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.values)

    def is_mapped(self, name: str) -> bool:
        return self.mapping is not None and name in self.mapping

    def is_set(self, name: str) -> bool:
        """
        Проверяет, что колонка есть в mapping и у записи хватает значений для неё.
        """
        return self.is_mapped(name) and self._in_range(self.mapping[name])

    def is_consistent(self) -> bool:
        """
        Назначение:
            Сверяет размер заголовка с числом значений.

        Выходные данные:
            bool
                True, если заголовка нет или размеры совпадают и каждый индекс
                заголовка попадает в [0, size()). Некоторые экспортёры пишут
                короткие/длинные строки, такие файлы всё ещё читаемы.
        """
        if self.mapping is None:
            return True
        if len(self.mapping) != len(self.values):
            return False
        return all(self._in_range(index) for index in self.mapping.values())

    def put_in(self, target: M) -> M:
        """
        Назначение:
            Переносит значения по именам в переданный mapping.

        Поведение:
            - Имена, чей индекс за пределами values, пропускаются.
            - Без mapping target возвращается без изменений.
        """
        if self.mapping is None:
            return target
        for name, index in self.mapping.items():
            if self._in_range(index):
                target[name] = self.values[index]
        return target

    def to_ordered_map(self) -> dict[str, str | None]:
        """
        Назначение:
            Копия записи в новый dict в порядке mapping. Dict не связан с записью.
        """
        return self.put_in({})

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_number": self.record_number,
            "character_position": self.character_position,
            "comment": self.comment,
            "values": list(self.values),
            "fields": self.to_ordered_map(),
        }

    def __str__(self) -> str:
        mapping = None if self.mapping is None else dict(self.mapping)
        return (
            f"CsvRecord [comment={self.comment}, mapping={mapping}, "
            f"recordNumber={self.record_number}, values={list(self.values)}]"
        )


class CsvRecordBuilder:
    """
    Назначение/ответственность:
        Пошаговая сборка CsvRecord до единственного вызова build().

    Ограничения:
        - Один владелец, не потокобезопасен. Нормализация значений выполняется
          в конструкторе CsvRecord.
    """

    def __init__(self) -> None:
        self._values: Iterable[str | None] | None = None
        self._mapping: Mapping[str, int] | None = None
        self._comment: str | None = None
        self._record_number = 0
        self._character_position = 0

    def with_values(self, values: Iterable[str | None] | None) -> CsvRecordBuilder:
        self._values = values
        return self

    def with_mapping(self, mapping: Mapping[str, int] | None) -> CsvRecordBuilder:
        self._mapping = mapping
        return self

    def with_comment(self, comment: str | None) -> CsvRecordBuilder:
        self._comment = comment
        return self

    def with_record_number(self, record_number: int) -> CsvRecordBuilder:
        self._record_number = record_number
        return self

    def with_character_position(self, character_position: int) -> CsvRecordBuilder:
        self._character_position = character_position
        return self

    def build(self) -> CsvRecord:
        return CsvRecord(
            values=self._values,
            mapping=self._mapping,
            comment=self._comment,
            record_number=self._record_number,
            character_position=self._character_position,
        )
