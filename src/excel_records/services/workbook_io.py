"""Reading and writing rows of cell text from ``.xlsx`` workbooks."""

from __future__ import annotations

import io
import os
import zipfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import IO, Any

from openpyxl import Workbook, load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from excel_records import config
from excel_records.columns import cell_reference
from excel_records.services.converter import TypeConverter
from excel_records.utils.exceptions import (
    MissingSheetError,
    WorkbookNotFoundError,
    WorkbookReadError,
    WorkbookWriteError,
)
from excel_records.utils.logging import get_logger

logger = get_logger(__name__)

WorkbookSource = str | os.PathLike[str] | bytes | IO[bytes]
WorkbookDestination = str | os.PathLike[str] | IO[bytes]

# openpyxl data types of cells that hold text, including inline strings
# written without content.
_TEXT_TYPES = frozenset({"s", "str", "inlineStr"})


def describe(target: Any) -> str:
    """Short description of a workbook source or destination for messages."""
    if isinstance(target, (str, os.PathLike)):
        return str(target)
    if isinstance(target, bytes):
        return f"<{len(target)} bytes>"
    return getattr(target, "name", None) or f"<{type(target).__name__}>"


class WorkbookReader:
    """Reads the rows of one worksheet as cell text using openpyxl."""

    def __init__(self, converter: TypeConverter | None = None) -> None:
        self.converter = converter or TypeConverter()

    def read_rows(
        self, source: WorkbookSource, sheet_name: str | None = None
    ) -> list[list[str | None]]:
        """Read every row of a worksheet.

        Cells holding numbers, dates or booleans are rendered with the
        converter's canonical text. A cell holding empty text is returned as
        ``""``; a cell with no content is returned as ``None``. Trailing
        ``None`` cells are dropped from each row.

        Args:
            source: Path to an ``.xlsx`` file, its raw bytes, or a binary stream.
            sheet_name: Worksheet to read; the first worksheet if None.

        Returns:
            Rows in sheet order.

        Raises:
            WorkbookNotFoundError: If a path source does not exist.
            WorkbookReadError: If the content is not a readable workbook.
            MissingSheetError: If the workbook has no such worksheet.
        """
        name = describe(source)
        handle: Any = source
        if isinstance(source, (str, os.PathLike)):
            if not Path(source).exists():
                raise WorkbookNotFoundError(name)
        elif isinstance(source, bytes):
            handle = io.BytesIO(source)

        try:
            workbook = load_workbook(filename=handle, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            raise WorkbookReadError(
                f"Unable to open workbook: {e}", source=name
            ) from e

        try:
            worksheet = self._select_sheet(workbook, sheet_name, name)
            rows = [self._row_text(cells) for cells in worksheet.iter_rows()]
        finally:
            workbook.close()

        logger.debug(
            "Read worksheet", source=name, sheet=worksheet.title, rows=len(rows)
        )
        return rows

    @staticmethod
    def _select_sheet(workbook: Any, sheet_name: str | None, source: str) -> Any:
        worksheets = workbook.worksheets
        if sheet_name is None:
            if not worksheets:
                raise MissingSheetError(source=source, available_sheets=[])
            return worksheets[0]
        for worksheet in worksheets:
            if worksheet.title == sheet_name:
                return worksheet
        raise MissingSheetError(
            sheet_name=sheet_name,
            source=source,
            available_sheets=[ws.title for ws in worksheets],
        )

    def _row_text(self, cells: Iterable[Any]) -> list[str | None]:
        row = [self._cell_text(cell) for cell in cells]
        while row and row[-1] is None:
            row.pop()
        return row

    def _cell_text(self, cell: Any) -> str | None:
        # Gaps in a row come back as EmptyCell; a written "" is a present
        # string cell without a value.
        if isinstance(cell, EmptyCell):
            return None
        if cell.value is None:
            return "" if cell.data_type in _TEXT_TYPES else None
        return self.converter.to_text(cell.value)


class WorkbookWriter:
    """Writes rows of cell text as a single-sheet workbook using openpyxl."""

    def write_rows(
        self,
        rows: Sequence[Sequence[str]],
        destination: WorkbookDestination,
        sheet_name: str | None = None,
    ) -> None:
        """Write rows as plain text cells.

        The workbook is built and serialized in memory; the destination
        receives data only once serialization has succeeded.

        Args:
            rows: Rows of cell text, header first.
            destination: Output path or writable binary stream.
            sheet_name: Worksheet title; the ``sheet_name`` setting if None.

        Raises:
            WorkbookWriteError: If the workbook cannot be built or written.
        """
        name = describe(destination)
        payload = self.to_bytes(rows, sheet_name or config.settings.sheet_name, name)

        try:
            if isinstance(destination, (str, os.PathLike)):
                Path(destination).write_bytes(payload)
            else:
                destination.write(payload)
        except OSError as e:
            raise WorkbookWriteError(
                f"Unable to write workbook: {e}", destination=name
            ) from e

        logger.debug(
            "Wrote worksheet", destination=name, rows=len(rows), size=len(payload)
        )

    def to_bytes(
        self, rows: Sequence[Sequence[str]], sheet_name: str, destination: str = ""
    ) -> bytes:
        """Serialize rows to the bytes of an ``.xlsx`` file."""
        workbook = Workbook()
        worksheet = workbook.active
        try:
            worksheet.title = sheet_name
            for row_number, row in enumerate(rows, start=1):
                for column_number, text in enumerate(row, start=1):
                    cell = worksheet[cell_reference(column_number, row_number)]
                    cell.value = text
                    # Force text cells; openpyxl would turn "=..." into a formula.
                    cell.data_type = "s"
            buffer = io.BytesIO()
            workbook.save(buffer)
        except (IllegalCharacterError, ValueError) as e:
            raise WorkbookWriteError(
                f"Unable to build workbook: {e}", destination=destination or None
            ) from e
        finally:
            workbook.close()
        return buffer.getvalue()
