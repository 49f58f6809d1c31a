from __future__ import annotations

import logging
from pathlib import Path

from csvrecord.domain.record import CsvRecord

LOG_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

LOG_FORMAT = (
    "%(asctime)s %(levelname)s runId=%(runId)s comp=%(component)s "
    "record=%(recordNumber)s pos=%(characterPosition)s msg=%(message)s"
)


def mapLogLevel(levelName: str | None) -> int:
    """
    Назначение:
        Преобразует строковый уровень логирования (ERROR|WARN|INFO|DEBUG) в logging level.
    """
    value = (levelName or "").strip().upper()
    if value not in LOG_LEVELS:
        raise ValueError(f"Unsupported log level: {levelName}")
    return LOG_LEVELS[value]


class RecordContextFilter(logging.Filter):
    """
    Назначение:
        Дополняет LogRecord контекстом запуска и записи CSV, чтобы форматтер
        не падал KeyError на событиях вне записи.

    Поведение:
        - runId берётся из лога команды, component по умолчанию 'core'.
        - recordNumber/characterPosition = '-' для событий без записи.
    """

    def __init__(self, runId: str) -> None:
        super().__init__()
        self.runId = runId

    def filter(self, record: logging.LogRecord) -> bool:
        record.__dict__.setdefault("runId", self.runId)
        record.__dict__.setdefault("component", "core")
        record.__dict__.setdefault("recordNumber", "-")
        record.__dict__.setdefault("characterPosition", "-")
        return True


class CommandLog:
    """
    Назначение/ответственность:
        Лог одной команды: файл <log_dir>/<command>_<runId>.log и запись
        событий с привязкой к CsvRecord (номер записи и смещение в источнике).

    Ограничения:
        - Один владелец на запуск команды; close() обязателен (runWithReport).
    """

    def __init__(self, commandName: str, logDir: str, runId: str, logLevel: str) -> None:
        Path(logDir).mkdir(parents=True, exist_ok=True)
        self.runId = runId
        self.path = str(Path(logDir) / f"{commandName}_{runId}.log")

        level = mapLogLevel(logLevel)
        self.logger = logging.getLogger(f"csvrecord.{commandName}.{runId}")
        self.logger.propagate = False
        self.logger.setLevel(level)
        self._drop_handlers()

        handler = logging.FileHandler(self.path, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        handler.addFilter(RecordContextFilter(runId))
        self.logger.addHandler(handler)

    def event(self, level: int, component: str, message: str, record: CsvRecord | None = None) -> None:
        extra = {"runId": self.runId, "component": component}
        if record is not None:
            extra["recordNumber"] = record.record_number
            extra["characterPosition"] = record.character_position
        self.logger.log(level, message, extra=extra)

    def close(self) -> None:
        self._drop_handlers()

    def _drop_handlers(self) -> None:
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
