"""Services for excel-records."""

from excel_records.services.converter import TypeConverter
from excel_records.services.mapper import ColumnBinding, RecordMapper
from excel_records.services.workbook_io import WorkbookReader, WorkbookWriter

__all__ = [
    "ColumnBinding",
    "RecordMapper",
    "TypeConverter",
    "WorkbookReader",
    "WorkbookWriter",
]
