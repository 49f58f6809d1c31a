from __future__ import annotations

import logging
from typing import Iterable

from csvrecord.domain.record import CsvRecord
from csvrecord.domain.reporting.collector import ReportCollector
from csvrecord.domain.reporting.models import ReportDiagnostic
from csvrecord.infra.logging.setup import CommandLog


def unsetFields(record: CsvRecord) -> list[str]:
    """
    Назначение:
        Имена заголовка, для которых у записи нет значения (индекс вне [0, size())).
    """
    if record.mapping is None:
        return []
    return [name for name in record.mapping if not record.is_set(name)]


class CheckUseCase:
    """
    Назначение/ответственность:
        Сверка заголовка с числом значений по всем записям источника.

    Поведение:
        - Несогласованная запись не прерывает проход: она логируется (WARNING)
          и попадает в отчёт.
        - strict=True -> exit code 1 при наличии несогласованных записей.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def run(
        self,
        record_source: Iterable[CsvRecord],
        log: CommandLog,
        report: ReportCollector,
    ) -> int:
        for record in record_source:
            report.count_record(record)
            if record.is_consistent():
                continue

            missing = unsetFields(record)
            expected = len(record.mapping) if record.mapping is not None else 0
            message = f"Inconsistent record: expected {expected} values, got {record.size()}"
            log.event(logging.WARNING, "check", message, record=record)
            report.add_item(
                status="INCONSISTENT",
                record=record,
                diagnostics=[
                    ReportDiagnostic(
                        code="INCONSISTENT_RECORD",
                        message=message,
                        details={"expected": expected, "size": record.size(), "unset_fields": missing},
                    )
                ],
            )

        summary = report.summary
        log.event(
            logging.INFO,
            "check",
            f"Check finished: records={summary.records_total} consistent={summary.records_consistent} "
            f"inconsistent={summary.records_inconsistent}",
        )
        if self.strict and summary.records_inconsistent:
            return 1
        return 0
