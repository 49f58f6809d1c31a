from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable

from csvrecord.common.time import getNowIso
from csvrecord.domain.record import CsvRecord
from csvrecord.domain.reporting.models import (
    ReportDiagnostic,
    ReportEnvelope,
    ReportItem,
    ReportMeta,
    ReportSummary,
)


class ReportCollector:
    """
    Назначение/ответственность:
        Отчёт одного запуска команды над CSV: счётчики согласованных и
        несогласованных записей, элементы по проблемным записям, запись JSON.

    Инварианты/гарантии:
        - summary считает все записи, даже если items обрезаны по items_limit.
        - Файл отчёта: <report_dir>/report_<command>_<run_id>.json.
    """

    def __init__(
        self,
        run_id: str,
        command: str,
        *,
        csv_path: str | None = None,
        items_limit: int | None = None,
        config_sources: list[str] | None = None,
        started_at: str | None = None,
    ) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
            csv_path=csv_path,
            items_limit=items_limit,
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None
        if config_sources:
            self.set_context("config", {"sources": list(config_sources)})

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def count_record(self, record: CsvRecord) -> None:
        self.summary.records_total += 1
        if record.is_consistent():
            self.summary.records_consistent += 1
        else:
            self.summary.records_inconsistent += 1

    def add_item(
        self,
        *,
        status: str,
        record: CsvRecord,
        diagnostics: Iterable[ReportDiagnostic] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        diagnostic_list = list(diagnostics or [])
        if status == "FAILED":
            self.summary.errors_total += max(len(diagnostic_list), 1)

        if not self._should_store_item():
            self.meta.items_truncated = True
            return
        self.items.append(
            ReportItem(
                status=status,
                record_number=record.record_number,
                character_position=record.character_position,
                diagnostics=diagnostic_list,
                meta=meta or {},
            )
        )

    def finish(
        self,
        finished_at: str | None = None,
        duration_ms: int | None = None,
        log_file: str | None = None,
        report_dir: str | None = None,
    ) -> None:
        """
        Назначение:
            Фиксирует время завершения, длительность и пути артефактов запуска.
        """
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if log_file is not None or report_dir is not None:
            self.set_context("runtime", {"log_file": log_file, "report_dir": report_dir})
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            context=self.context,
        )

    def write_json(self, report_dir: str) -> str:
        """
        Назначение:
            Записывает отчёт на диск.

        Выходные данные:
            str
                Путь к файлу отчёта.
        """
        Path(report_dir).mkdir(parents=True, exist_ok=True)
        report_path = Path(report_dir) / f"report_{self.meta.command}_{self.meta.run_id}.json"
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(asdict_report(self.build()), f, ensure_ascii=False, indent=2)
        return str(report_path)

    def _should_store_item(self) -> bool:
        limit = self.meta.items_limit
        if limit is None:
            return True
        return len(self.items) < limit

    def _derive_status(self) -> str:
        if self.summary.errors_total == 0 and self.summary.records_inconsistent == 0:
            return "SUCCESS"
        if self.summary.records_consistent > 0:
            return "PARTIAL"
        return "FAILED"


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [asdict(item) for item in envelope.items],
        "context": envelope.context,
    }
