from csvrecord.infra.sources.csv_reader import CsvRecordSource
from csvrecord.infra.sources.csv_utils import CsvDialect, CsvFormatError

__all__ = ["CsvRecordSource", "CsvDialect", "CsvFormatError"]
