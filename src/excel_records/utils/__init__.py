"""Utilities package for excel-records.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from excel_records.utils.exceptions import (
    ConfigurationError,
    ConversionError,
    EmptyInputError,
    EmptySourceError,
    ErrorCode,
    ExcelRecordsError,
    HeaderMismatchError,
    MappingError,
    MissingSheetError,
    RecordTypeError,
    SinkError,
    SourceError,
    WorkbookNotFoundError,
    WorkbookReadError,
    WorkbookWriteError,
)
from excel_records.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
    timed_operation,
)

__all__ = [
    # Exceptions
    "ConfigurationError",
    "ConversionError",
    "EmptyInputError",
    "EmptySourceError",
    "ErrorCode",
    "ExcelRecordsError",
    "HeaderMismatchError",
    "MappingError",
    "MissingSheetError",
    "RecordTypeError",
    "SinkError",
    "SourceError",
    "WorkbookNotFoundError",
    "WorkbookReadError",
    "WorkbookWriteError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "timed_operation",
]
