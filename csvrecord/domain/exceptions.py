from __future__ import annotations

from dataclasses import asdict, dataclass, fields, is_dataclass
from typing import Any

from csvrecord.domain.error_codes import ErrorCode


class RecordAccessError(Exception):
    """
    Назначение:
        Базовый класс ошибок обращения к полям CsvRecord.
    Инварианты/гарантии:
        - Ни одна из ошибок не является retryable: операции записи детерминированы.
    """

    code = ErrorCode.RECORD_ACCESS_ERROR

    def __reduce__(self):
        if not is_dataclass(self):
            return super().__reduce__()
        return (self.__class__, tuple(getattr(self, f.name) for f in fields(self)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": str(self),
            "details": asdict(self) if is_dataclass(self) else {},
        }


@dataclass
class MissingMappingError(RecordAccessError):
    """
    Назначение:
        Доступ по имени к записи, у которой нет заголовка (mapping=None).
    """

    record_number: int | None = None

    code = ErrorCode.MISSING_MAPPING

    def __str__(self) -> str:
        return "No header mapping was specified, the record values can't be accessed by name"


@dataclass
class UnknownNameError(RecordAccessError, KeyError):
    """
    Назначение:
        Имя отсутствует в mapping записи.
    Инварианты/гарантии:
        - known_names перечисляет все имена mapping для диагностики.
    """

    name: str
    known_names: list[str]

    code = ErrorCode.UNKNOWN_NAME

    def __str__(self) -> str:
        return f"Mapping for {self.name} not found, expected one of {self.known_names}"


@dataclass
class InconsistentRecordError(RecordAccessError, LookupError):
    """
    Назначение:
        Имя указывает на индекс за пределами значений записи.
    """

    name: str
    index: int
    size: int

    code = ErrorCode.INCONSISTENT_RECORD

    def __str__(self) -> str:
        return f"Index for header '{self.name}' is {self.index} but CsvRecord only has {self.size} values!"


@dataclass
class IndexOutOfRangeError(RecordAccessError, IndexError):
    index: int
    size: int

    code = ErrorCode.INDEX_OUT_OF_RANGE

    def __str__(self) -> str:
        return f"Index {self.index} is out of range for CsvRecord with {self.size} values"


__all__ = [
    "RecordAccessError",
    "MissingMappingError",
    "UnknownNameError",
    "InconsistentRecordError",
    "IndexOutOfRangeError",
]
