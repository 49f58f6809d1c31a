from __future__ import annotations

import logging
from typing import Callable, Iterable

from csvrecord.domain.exceptions import (
    IndexOutOfRangeError,
    InconsistentRecordError,
    MissingMappingError,
    UnknownNameError,
)
from csvrecord.domain.record import CsvRecord
from csvrecord.domain.reporting.collector import ReportCollector
from csvrecord.domain.reporting.models import ReportDiagnostic
from csvrecord.infra.logging.setup import CommandLog


class ColumnUseCase:
    """
    Назначение/ответственность:
        Извлекает одну колонку (по имени или индексу) из каждой записи.

    Поведение:
        - MissingMappingError/UnknownNameError пробрасываются наверх: это
          ошибка вызова, продолжать бессмысленно.
        - InconsistentRecordError/IndexOutOfRangeError фиксируются по записи,
          проход продолжается, итоговый exit code = 1.
    """

    def __init__(self, name: str | None = None, index: int | None = None) -> None:
        if (name is None) == (index is None):
            raise ValueError("Exactly one of name or index must be given")
        self.name = name
        self.index = index

    def _extract(self, record: CsvRecord) -> str | None:
        if self.name is not None:
            return record.get_by_name(self.name)
        return record.get_by_index(self.index)

    def run(
        self,
        record_source: Iterable[CsvRecord],
        emit: Callable[[str | None], None],
        log: CommandLog,
        report: ReportCollector,
    ) -> int:
        exitCode = 0
        for record in record_source:
            report.count_record(record)
            try:
                value = self._extract(record)
            except (MissingMappingError, UnknownNameError) as exc:
                log.event(logging.ERROR, "column", f"{exc.code.value}: {exc}", record=record)
                report.add_item(
                    status="FAILED",
                    record=record,
                    diagnostics=[ReportDiagnostic(**exc.to_dict())],
                )
                raise
            except (InconsistentRecordError, IndexOutOfRangeError) as exc:
                log.event(logging.ERROR, "column", f"{exc.code.value}: {exc}", record=record)
                report.add_item(
                    status="FAILED",
                    record=record,
                    diagnostics=[ReportDiagnostic(**exc.to_dict())],
                )
                exitCode = 1
                continue
            emit(value)
        return exitCode
