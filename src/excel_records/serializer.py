"""Import and export of typed records as Excel worksheets.

Example:
    >>> from dataclasses import dataclass
    >>> from excel_records import ExcelSerializer
    >>>
    >>> @dataclass
    ... class Person:
    ...     Id: int = 0
    ...     Name: str = ""
    >>>
    >>> serializer = ExcelSerializer()
    >>> serializer.export_to_excel([Person(1, "Alice")], "people.xlsx")
    >>> serializer.import_from_excel("people.xlsx", Person)
    [Person(Id=1, Name='Alice')]
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

import pandas as pd

from excel_records.models import RecordSchema, schema_for
from excel_records.services.converter import TypeConverter
from excel_records.services.frames import rows_from_dataframe, rows_to_dataframe
from excel_records.services.mapper import RecordMapper, Row
from excel_records.services.workbook_io import (
    WorkbookDestination,
    WorkbookReader,
    WorkbookSource,
    WorkbookWriter,
    describe,
)
from excel_records.utils.exceptions import EmptyInputError
from excel_records.utils.logging import LogContext, get_logger, timed_operation

logger = get_logger(__name__)

T = TypeVar("T")

RecordType = type[T] | RecordSchema[T]


class ExcelSerializer:
    """Reads records from and writes records to single-sheet workbooks.

    Args:
        converter: Cell text converter shared by every call; a default one
            is created if None. Register custom types on it to map them.
        validate_header_override: Reject header overrides whose length
            differs from the exported field count. Defaults to the setting.
    """

    def __init__(
        self,
        converter: TypeConverter | None = None,
        *,
        validate_header_override: bool | None = None,
    ) -> None:
        self.converter = converter or TypeConverter()
        self.validate_header_override = validate_header_override
        self._reader = WorkbookReader(self.converter)
        self._writer = WorkbookWriter()

    def mapper(self, record_type: RecordType[T]) -> RecordMapper[T]:
        """Build a mapper for a record class or an explicit schema."""
        schema = (
            record_type
            if isinstance(record_type, RecordSchema)
            else schema_for(record_type)
        )
        return RecordMapper(
            schema,
            self.converter,
            validate_header_override=self.validate_header_override,
        )

    # ------------------------------------------------------------------ #
    # Rows
    # ------------------------------------------------------------------ #

    def import_rows(self, rows: Iterable[Row], record_type: RecordType[T]) -> list[T]:
        """Map a header row plus data rows to records."""
        return self.mapper(record_type).import_rows(rows)

    def export_rows(
        self,
        records: Sequence[T],
        header_override: Sequence[str] | None = None,
        *,
        record_type: RecordType[T] | None = None,
    ) -> list[list[str]]:
        """Map records to a header row plus data rows.

        The record type defaults to the class of the first record.
        """
        return self._export_mapper(records, record_type).export_rows(
            records, header_override
        )

    # ------------------------------------------------------------------ #
    # Workbooks
    # ------------------------------------------------------------------ #

    def import_from_excel(
        self,
        source: WorkbookSource,
        record_type: RecordType[T],
        *,
        sheet_name: str | None = None,
    ) -> list[T]:
        """Read records from the first (or named) worksheet of a workbook.

        Args:
            source: Path to an ``.xlsx`` file, its bytes, or a binary stream.
            record_type: Record class or explicit schema.
            sheet_name: Worksheet to read; the first worksheet if None.

        Returns:
            One record per data row, in sheet order.
        """
        name = describe(source)
        with LogContext(operation="import", source=name):
            with timed_operation(logger, "import_from_excel") as metrics:
                rows = self._reader.read_rows(source, sheet_name)
                metrics.rows = len(rows)
                records = self.mapper(record_type).import_rows(rows)
                metrics.records = len(records)
        logger.info("Imported records from workbook", source=name, records=len(records))
        return records

    def export_to_excel(
        self,
        records: Sequence[T],
        destination: WorkbookDestination,
        header_override: Sequence[str] | None = None,
        *,
        record_type: RecordType[T] | None = None,
    ) -> None:
        """Write records to a new single-sheet workbook.

        Nothing is written to ``destination`` unless every row was built.

        Args:
            records: Records to export; must not be empty.
            destination: Output path or writable binary stream.
            header_override: Header texts used instead of the field names.
            record_type: Record class or explicit schema; defaults to the
                class of the first record.
        """
        name = describe(destination)
        with LogContext(operation="export", destination=name):
            with timed_operation(logger, "export_to_excel") as metrics:
                rows = self.export_rows(
                    records, header_override, record_type=record_type
                )
                metrics.records = len(records)
                metrics.rows = len(rows)
                self._writer.write_rows(rows, destination)
        logger.info(
            "Exported records to workbook", destination=name, records=len(records)
        )

    # ------------------------------------------------------------------ #
    # DataFrames
    # ------------------------------------------------------------------ #

    def import_from_dataframe(
        self, frame: pd.DataFrame, record_type: RecordType[T]
    ) -> list[T]:
        """Map DataFrame rows to records, using column labels as the header."""
        return self.import_rows(rows_from_dataframe(frame, self.converter), record_type)

    def export_to_dataframe(
        self,
        records: Sequence[T],
        header_override: Sequence[str] | None = None,
        *,
        record_type: RecordType[T] | None = None,
    ) -> pd.DataFrame:
        """Render records as a DataFrame of cell text."""
        return rows_to_dataframe(
            self.export_rows(records, header_override, record_type=record_type)
        )

    def _export_mapper(
        self, records: Sequence[Any], record_type: RecordType[T] | None
    ) -> RecordMapper[T]:
        if record_type is None:
            if not records:
                raise EmptyInputError()
            record_type = type(records[0])
        return self.mapper(record_type)
