"""Header-driven mapping between rows of cell text and records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from excel_records import config
from excel_records.models import FieldDescriptor, RecordSchema, schema_for
from excel_records.services.converter import TypeConverter
from excel_records.utils.exceptions import (
    EmptyInputError,
    EmptySourceError,
    HeaderMismatchError,
)
from excel_records.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Row = Sequence[str | None]


@dataclass(frozen=True)
class ColumnBinding:
    """A header column resolved to the field it populates."""

    position: int
    descriptor: FieldDescriptor


class RecordMapper(Generic[T]):
    """Maps rows of cell text to records of one type, and records to rows.

    The first row of an import is the header; each header cell names the
    field its column binds to. Columns naming no writable field, and blank
    header cells, are ignored rather than rejected.

    Both directions are all-or-nothing: a failure raises before any result
    is returned.
    """

    def __init__(
        self,
        schema: RecordSchema[T],
        converter: TypeConverter | None = None,
        *,
        validate_header_override: bool | None = None,
    ) -> None:
        """Initialize the mapper.

        Args:
            schema: Field descriptor table of the record type.
            converter: Cell text converter; a default one is created if None.
            validate_header_override: Reject header overrides whose length
                differs from the exported field count. Defaults to the
                ``validate_header_override`` setting.
        """
        if validate_header_override is None:
            validate_header_override = config.settings.validate_header_override

        self.schema = schema
        self.converter = converter or TypeConverter()
        self.validate_header_override = validate_header_override

    @classmethod
    def for_type(
        cls,
        record_type: type[T],
        converter: TypeConverter | None = None,
        **kwargs: Any,
    ) -> RecordMapper[T]:
        """Create a mapper for a record class using its cached schema."""
        return cls(schema_for(record_type), converter, **kwargs)

    # ------------------------------------------------------------------ #
    # Import
    # ------------------------------------------------------------------ #

    def import_rows(self, rows: Iterable[Row]) -> list[T]:
        """Build one record per data row.

        Args:
            rows: Header row followed by data rows. A ``None`` cell is
                absent and leaves its field at the default value.

        Returns:
            Records in data row order.

        Raises:
            EmptySourceError: If ``rows`` yields nothing.
            RecordTypeError: If records cannot be created without arguments.
            ConversionError: If any bound cell fails to convert.
        """
        iterator = iter(rows)
        header = next(iterator, None)
        if header is None:
            raise EmptySourceError()

        if self.schema.factory is None:
            # Surface the constructor problem before reading any data.
            self.schema.new_record()

        bindings = self.bind_header(header)

        records: list[T] = []
        for row in iterator:
            records.append(self._build_record(row, bindings))

        logger.debug(
            "Imported records",
            record_type=self.schema.type_name,
            records=len(records),
            columns_bound=len(bindings),
        )
        return records

    def bind_header(self, header: Row) -> list[ColumnBinding]:
        """Resolve header cells to writable fields, in column order."""
        bindings: list[ColumnBinding] = []
        skipped: list[str] = []
        for position, name in enumerate(header):
            if name is None or not str(name).strip():
                continue
            descriptor = self.schema.get_field(str(name))
            if descriptor is None or not descriptor.writable:
                skipped.append(str(name))
                continue
            bindings.append(ColumnBinding(position, descriptor))

        if skipped:
            logger.debug(
                "Ignoring columns without a writable field",
                record_type=self.schema.type_name,
                columns=skipped,
            )
        return bindings

    def _build_record(self, row: Row, bindings: list[ColumnBinding]) -> T:
        record = self.schema.new_record()
        width = len(row)
        for binding in bindings:
            if binding.position >= width:
                # Bindings are ordered, so the rest are out of range too.
                break
            text = row[binding.position]
            if text is None:
                continue
            descriptor = binding.descriptor
            descriptor.set(
                record,
                self.converter.to_value(text, descriptor.field_type, descriptor.name),
            )
        return record

    # ------------------------------------------------------------------ #
    # Export
    # ------------------------------------------------------------------ #

    def export_rows(
        self,
        records: Sequence[T],
        header_override: Sequence[str] | None = None,
    ) -> list[list[str]]:
        """Render records as a header row followed by one row per record.

        Args:
            records: Records to export; must not be empty.
            header_override: Header texts used verbatim instead of the field
                names. Positions correspond to the exported field order.

        Returns:
            Rows of cell text.

        Raises:
            EmptyInputError: If ``records`` is empty.
            HeaderMismatchError: If header validation is enabled and the
                override length differs from the number of fields.
        """
        if not records:
            raise EmptyInputError()

        fields = self.schema.readable_fields
        if header_override is not None:
            header = [str(text) for text in header_override]
            if len(header) != len(fields):
                if self.validate_header_override:
                    raise HeaderMismatchError(len(header), len(fields))
                logger.warning(
                    "Header override length differs from field count",
                    record_type=self.schema.type_name,
                    header_count=len(header),
                    field_count=len(fields),
                )
        else:
            header = [descriptor.name for descriptor in fields]

        to_text = self.converter.to_text
        rows = [header]
        for record in records:
            rows.append([to_text(descriptor.get(record)) for descriptor in fields])

        logger.debug(
            "Exported records",
            record_type=self.schema.type_name,
            records=len(records),
            columns=len(fields),
        )
        return rows
