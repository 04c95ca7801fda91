"""Centralized exception classes for excel-records.

This module provides a hierarchy of custom exceptions with error codes
and structured error details for consistent error handling across the
import and export paths.

Exception Hierarchy:
    ExcelRecordsError (base)
    ├── SourceError
    │   ├── EmptySourceError
    │   ├── MissingSheetError
    │   ├── WorkbookNotFoundError
    │   └── WorkbookReadError
    ├── SinkError
    │   ├── EmptyInputError
    │   ├── HeaderMismatchError
    │   └── WorkbookWriteError
    ├── MappingError
    │   ├── ConversionError
    │   └── RecordTypeError
    └── ConfigurationError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used by the library.

    Error codes are grouped by category:
    - E1xxx: Row source / workbook read errors
    - E2xxx: Row sink / workbook write errors
    - E3xxx: Record mapping errors
    - E9xxx: Internal/unexpected errors
    """

    # Source errors (E1xxx)
    EMPTY_SOURCE = "E1001"
    MISSING_SHEET = "E1002"
    WORKBOOK_NOT_FOUND = "E1003"
    WORKBOOK_READ_ERROR = "E1004"

    # Sink errors (E2xxx)
    EMPTY_INPUT = "E2001"
    HEADER_MISMATCH = "E2002"
    WORKBOOK_WRITE_ERROR = "E2003"

    # Mapping errors (E3xxx)
    CONVERSION_FAILED = "E3001"
    UNSUPPORTED_RECORD_TYPE = "E3002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class ExcelRecordsError(Exception):
    """Base exception for all excel-records errors.

    Provides:
    - Unique error codes for programmatic handling
    - Structured error details for logging and debugging

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Source Errors (E1xxx)
# =============================================================================


class SourceError(ExcelRecordsError):
    """Base class for errors raised while reading rows."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_READ_ERROR,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with source information.

        Args:
            message: Error message.
            error_code: Error code.
            source: Description of the row source (usually a file path).
            details: Additional details.
        """
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, error_code, details)
        self.source = source


class EmptySourceError(SourceError):
    """Raised when an import finds no rows at all, not even a header."""

    def __init__(
        self,
        message: str = "No header row found in the row source.",
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.EMPTY_SOURCE,
            source=source,
            details=details,
        )


class MissingSheetError(SourceError):
    """Raised when the workbook exposes no readable worksheet."""

    def __init__(
        self,
        sheet_name: str | None = None,
        source: str | None = None,
        available_sheets: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with sheet information.

        Args:
            sheet_name: Name of the requested sheet, or None for "any sheet".
            source: Optional description of the workbook.
            available_sheets: Worksheet names present in the workbook.
            details: Additional details.
        """
        details = details or {}
        if sheet_name:
            details["sheet_name"] = sheet_name
            message = f"Sheet '{sheet_name}' not found in workbook"
        else:
            message = "Workbook contains no worksheet"
        if available_sheets is not None:
            details["available_sheets"] = available_sheets
        super().__init__(
            message=message,
            error_code=ErrorCode.MISSING_SHEET,
            source=source,
            details=details,
        )
        self.sheet_name = sheet_name
        self.available_sheets = available_sheets or []


class WorkbookNotFoundError(SourceError):
    """Raised when a workbook path does not exist.

    Note: Not named FileNotFoundError to avoid shadowing the built-in.
    """

    def __init__(
        self,
        file_path: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Excel file not found: {file_path}",
            error_code=ErrorCode.WORKBOOK_NOT_FOUND,
            source=file_path,
            details=details,
        )


class WorkbookReadError(SourceError):
    """Raised when workbook content cannot be opened or parsed."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_READ_ERROR,
            source=source,
            details=details,
        )


# =============================================================================
# Sink Errors (E2xxx)
# =============================================================================


class SinkError(ExcelRecordsError):
    """Base class for errors raised while producing rows."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_WRITE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class EmptyInputError(SinkError):
    """Raised when an export is requested for an empty record list."""

    def __init__(
        self,
        message: str = "The record list is empty.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.EMPTY_INPUT,
            details=details,
        )


class HeaderMismatchError(SinkError):
    """Raised when a header override does not line up with the exported fields."""

    def __init__(
        self,
        header_count: int,
        field_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the two lengths.

        Args:
            header_count: Number of header override entries.
            field_count: Number of exported fields.
            details: Additional details.
        """
        details = details or {}
        details["header_count"] = header_count
        details["field_count"] = field_count
        super().__init__(
            message=(
                f"Header override has {header_count} entries but "
                f"{field_count} fields are exported"
            ),
            error_code=ErrorCode.HEADER_MISMATCH,
            details=details,
        )
        self.header_count = header_count
        self.field_count = field_count


class WorkbookWriteError(SinkError):
    """Raised when a workbook cannot be built or written."""

    def __init__(
        self,
        message: str,
        destination: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if destination:
            details["destination"] = destination
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_WRITE_ERROR,
            details=details,
        )
        self.destination = destination


# =============================================================================
# Mapping Errors (E3xxx)
# =============================================================================


class MappingError(ExcelRecordsError):
    """Base class for record mapping errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONVERSION_FAILED,
        record_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if record_type:
            details["record_type"] = record_type
        super().__init__(message, error_code, details)
        self.record_type = record_type


class ConversionError(MappingError):
    """Raised when cell text cannot be converted to a field's declared type.

    The whole import is aborted; the error identifies the offending value,
    the field it was bound to and the target type.
    """

    def __init__(
        self,
        value: str | None,
        field_name: str,
        target_type: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with conversion context.

        Args:
            value: The original cell text.
            field_name: Name of the field the cell was bound to.
            target_type: Name of the field's declared type.
            reason: Optional explanation from the underlying parser.
            details: Additional details.
        """
        details = details or {}
        details["value"] = value
        details["field_name"] = field_name
        details["target_type"] = target_type
        if reason:
            details["reason"] = reason
        super().__init__(
            message=(
                f"Unable to convert value '{value}' to field '{field_name}' "
                f"of type '{target_type}'."
            ),
            error_code=ErrorCode.CONVERSION_FAILED,
            details=details,
        )
        self.value = value
        self.field_name = field_name
        self.target_type = target_type
        self.reason = reason


class RecordTypeError(MappingError):
    """Raised when a record type cannot be described or instantiated."""

    def __init__(
        self,
        message: str,
        record_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_RECORD_TYPE,
            record_type=record_type,
            details=details,
        )


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================


class ConfigurationError(ExcelRecordsError):
    """Raised for invalid library configuration."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
        self.setting = setting
