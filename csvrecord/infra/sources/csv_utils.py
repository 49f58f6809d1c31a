from __future__ import annotations

from dataclasses import dataclass

from csvrecord.domain.error_codes import ErrorCode


class CsvFormatError(Exception):
    """
    Назначение:
        Ошибка критического формата CSV (нет заголовка, дубли имён колонок и т.п.).
    """

    code = ErrorCode.CSV_FORMAT_ERROR


@dataclass(frozen=True)
class CsvDialect:
    """
    Назначение:
        Параметры разбора CSV для CsvRecordSource.
    """

    delimiter: str = ","
    quotechar: str = '"'
    comment_marker: str | None = None
    null_string: str | None = None
    has_header: bool = True
    trim: bool = False
    encoding: str = "utf-8-sig"


def parseValue(value: str | None, null_string: str | None = None, trim: bool = False) -> str | None:
    """
    Назначение:
        Тримит значение (если включено) и подставляет None вместо null_string.

    Входные данные:
        value: str | None
        null_string: str | None
            Токен, означающий отсутствие значения. None - подстановка выключена.
        trim: bool

    Выходные данные:
        str | None
    """
    if value is None:
        return None
    if trim:
        value = value.strip()
    if null_string is not None and value == null_string:
        return None
    return value


def buildHeaderMapping(names: list[str]) -> dict[str, int]:
    """
    Назначение:
        Строит mapping имя -> индекс по строке заголовка.

    Поведение:
        - Повторяющееся имя -> CsvFormatError.
    """
    mapping: dict[str, int] = {}
    for idx, name in enumerate(names):
        if name in mapping:
            raise CsvFormatError(f"Duplicate header name '{name}' at columns {mapping[name]} and {idx}")
        mapping[name] = idx
    return mapping
