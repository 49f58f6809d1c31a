from csvrecord.domain.exceptions import (
    IndexOutOfRangeError,
    InconsistentRecordError,
    MissingMappingError,
    RecordAccessError,
    UnknownNameError,
)
from csvrecord.domain.record import CsvRecord, CsvRecordBuilder

__all__ = [
    "CsvRecord",
    "CsvRecordBuilder",
    "RecordAccessError",
    "MissingMappingError",
    "UnknownNameError",
    "InconsistentRecordError",
    "IndexOutOfRangeError",
]
