from csvrecord.domain import (
    CsvRecord,
    CsvRecordBuilder,
    IndexOutOfRangeError,
    InconsistentRecordError,
    MissingMappingError,
    RecordAccessError,
    UnknownNameError,
)

__version__ = "0.1.0"

__all__ = [
    "CsvRecord",
    "CsvRecordBuilder",
    "RecordAccessError",
    "MissingMappingError",
    "UnknownNameError",
    "InconsistentRecordError",
    "IndexOutOfRangeError",
]
