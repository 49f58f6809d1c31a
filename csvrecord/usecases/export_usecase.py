from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from csvrecord.domain.record import CsvRecord
from csvrecord.domain.reporting.collector import ReportCollector
from csvrecord.infra.logging.setup import CommandLog


class ExportUseCase:
    """
    Назначение/ответственность:
        Выгрузка записей в JSON Lines (одна запись record.to_dict() на строку).

    Поведение:
        - Поля несогласованной записи выгружаются частично (только is_set имена).
    """

    def __init__(self, out_path: str) -> None:
        self.out_path = out_path

    def run(
        self,
        record_source: Iterable[CsvRecord],
        log: CommandLog,
        report: ReportCollector,
    ) -> int:
        Path(self.out_path).parent.mkdir(parents=True, exist_ok=True)
        with open(self.out_path, "w", encoding="utf-8") as f:
            for record in record_source:
                report.count_record(record)
                if not record.is_consistent():
                    log.event(logging.WARNING, "export", "Record is inconsistent, exporting partial fields", record=record)
                f.write(json.dumps(record.to_dict(), ensure_ascii=False))
                f.write("\n")

        report.set_context("export", {"out_path": self.out_path})
        log.event(logging.INFO, "export", f"Exported {report.summary.records_total} records to {self.out_path}")
        return 0
