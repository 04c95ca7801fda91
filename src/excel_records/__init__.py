"""excel-records - map typed records to and from Excel worksheets."""

from excel_records.columns import column_index, get_column_name
from excel_records.models import (
    FieldDescriptor,
    RecordSchema,
    clear_schema_cache,
    schema_for,
)
from excel_records.serializer import ExcelSerializer
from excel_records.services.converter import TypeConverter
from excel_records.services.mapper import RecordMapper
from excel_records.utils.exceptions import (
    ConversionError,
    EmptyInputError,
    EmptySourceError,
    ExcelRecordsError,
    HeaderMismatchError,
    MissingSheetError,
    RecordTypeError,
)

__all__ = [
    "ConversionError",
    "EmptyInputError",
    "EmptySourceError",
    "ExcelRecordsError",
    "ExcelSerializer",
    "FieldDescriptor",
    "HeaderMismatchError",
    "MissingSheetError",
    "RecordMapper",
    "RecordSchema",
    "RecordTypeError",
    "TypeConverter",
    "clear_schema_cache",
    "column_index",
    "get_column_name",
    "schema_for",
]
__version__ = "0.1.0"
