from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок доступа к записи и чтения CSV.
    """

    RECORD_ACCESS_ERROR = "RECORD_ACCESS_ERROR"
    MISSING_MAPPING = "MISSING_MAPPING"
    UNKNOWN_NAME = "UNKNOWN_NAME"
    INCONSISTENT_RECORD = "INCONSISTENT_RECORD"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    CSV_FORMAT_ERROR = "CSV_FORMAT_ERROR"
