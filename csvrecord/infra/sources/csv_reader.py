from __future__ import annotations

import csv
from types import MappingProxyType
from typing import Iterator, Mapping

from csvrecord.domain.record import CsvRecord, CsvRecordBuilder
from csvrecord.infra.sources.csv_utils import CsvDialect, CsvFormatError, buildHeaderMapping, parseValue


class _LineFeeder:
    """
    Назначение/ответственность:
        Отдаёт строки файла в csv.reader, отслеживая смещение начала записи
        и накапливая строки-комментарии между записями.

    Ограничения:
        - Комментарий распознаётся только на границе записи, поэтому маркер
          внутри многострочного поля в кавычках не считается комментарием.
    """

    def __init__(self, lines: Iterator[str], comment_marker: str | None) -> None:
        self._lines = lines
        self._comment_marker = comment_marker
        self._comments: list[str] = []
        self.position = 0
        self.record_start: int | None = None

    def __iter__(self) -> _LineFeeder:
        return self

    def __next__(self) -> str:
        while True:
            line = next(self._lines)
            start = self.position
            self.position += len(line)
            if self.record_start is None:
                if self._comment_marker and line.startswith(self._comment_marker):
                    self._comments.append(line[len(self._comment_marker):].strip())
                    continue
                self.record_start = start
            return line

    def take_record_start(self) -> int:
        start = self.record_start if self.record_start is not None else self.position
        self.record_start = None
        return start

    def take_comment(self) -> str | None:
        if not self._comments:
            return None
        comment = "\n".join(self._comments)
        self._comments = []
        return comment


class CsvRecordSource:
    """
    Назначение/ответственность:
        CSV-источник: читает файл через csv.reader и отдаёт CsvRecord.
        Заголовок (если есть) превращается в общий read-only mapping,
        разделяемый всеми записями файла.

    Взаимодействия:
        Каждый вызов iter() заново открывает файл. header/header_comment
        заполняются по ходу итерации.
    """

    def __init__(self, path: str, dialect: CsvDialect | None = None) -> None:
        self.path = path
        self.dialect = dialect or CsvDialect()
        self.header: tuple[str, ...] | None = None
        self.header_mapping: Mapping[str, int] | None = None
        self.header_comment: str | None = None

    def _parse_row(self, row: list[str]) -> list[str | None]:
        return [parseValue(value, self.dialect.null_string, self.dialect.trim) for value in row]

    def __iter__(self) -> Iterator[CsvRecord]:
        dialect = self.dialect
        with open(self.path, "r", encoding=dialect.encoding, newline="") as f:
            feeder = _LineFeeder(iter(f), dialect.comment_marker)
            reader = csv.reader(feeder, delimiter=dialect.delimiter, quotechar=dialect.quotechar)
            mapping: Mapping[str, int] | None = None
            need_header = dialect.has_header
            record_number = 0

            for row in reader:
                start = feeder.take_record_start()
                if not row:
                    continue
                if need_header:
                    names = [name.strip() if dialect.trim else name for name in row]
                    mapping = MappingProxyType(buildHeaderMapping(names))
                    self.header = tuple(names)
                    self.header_mapping = mapping
                    self.header_comment = feeder.take_comment()
                    need_header = False
                    continue

                record_number += 1
                yield (
                    CsvRecordBuilder()
                    .with_values(self._parse_row(row))
                    .with_mapping(mapping)
                    .with_comment(feeder.take_comment())
                    .with_record_number(record_number)
                    .with_character_position(start)
                    .build()
                )

            if need_header:
                raise CsvFormatError("Missing header in source CSV")
