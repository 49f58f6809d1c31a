from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    csv_path: str | None = None
    finished_at: str | None = None
    duration_ms: int | None = None
    items_limit: int | None = None
    items_truncated: bool = False


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики по прочитанным записям.
    """

    records_total: int = 0
    records_consistent: int = 0
    records_inconsistent: int = 0
    errors_total: int = 0


@dataclass(frozen=True)
class ReportDiagnostic:
    """
    Назначение:
        Диагностика по конкретной записи (обычно из RecordAccessError.to_dict()).
    """

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportItem:
    """
    Назначение:
        Единица отчёта, привязанная к конкретной записи.
    """

    status: str
    record_number: int
    character_position: int
    diagnostics: list[ReportDiagnostic] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportEnvelope:
    """
    Назначение:
        Корневой объект отчёта.
    """

    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
