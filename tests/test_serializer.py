"""End-to-end tests for the ExcelSerializer."""

from __future__ import annotations

import io
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pandas as pd
import pytest
from openpyxl import load_workbook

from excel_records import (
    ConversionError,
    EmptyInputError,
    ExcelSerializer,
    RecordSchema,
    TypeConverter,
)
from excel_records.models import FieldDescriptor
from excel_records.services.workbook_io import WorkbookWriter
from tests.fixtures import (
    Account,
    Counted,
    Employee,
    Labelled,
    Person,
    Priority,
    Reading,
    Status,
)


def _reading() -> Reading:
    return Reading(
        sensor="=cmd|' /C calc'!A0",
        count=-12,
        ratio=0.1 + 0.2,
        amount=Decimal("1234.5600"),
        enabled=True,
        taken_at=datetime(2024, 2, 29, 13, 45, 1, 250000),
        day=date(2024, 1, 15),
        status=Status.RETIRED,
        priority=Priority.HIGH,
        ident=UUID("12345678-1234-5678-1234-567812345678"),
        note="first line\nsecond line",
        limit=None,
    )


class TestWorkbookRoundTrip:
    """Tests exporting to a workbook and importing it back."""

    def test_people_round_trip(
        self,
        serializer: ExcelSerializer,
        people: list[Person],
        workbook_path: Path,
    ) -> None:
        serializer.export_to_excel(people, workbook_path)

        assert serializer.import_from_excel(workbook_path, Person) == people

    def test_empty_text_round_trips(self, serializer: ExcelSerializer) -> None:
        records = [Labelled(Id=1, Name=""), Labelled(Id=2, Name="Bob")]
        buffer = io.BytesIO()

        serializer.export_to_excel(records, buffer)

        assert serializer.import_from_excel(buffer.getvalue(), Labelled) == records

    def test_every_builtin_type_round_trips(
        self, serializer: ExcelSerializer, workbook_path: Path
    ) -> None:
        original = _reading()

        serializer.export_to_excel([original], workbook_path)

        assert serializer.import_from_excel(workbook_path, Reading) == [original]

    def test_cells_are_text(
        self,
        serializer: ExcelSerializer,
        people: list[Person],
        workbook_path: Path,
    ) -> None:
        serializer.export_to_excel(people, workbook_path)

        ws = load_workbook(workbook_path).active
        assert [cell.value for cell in ws[1]] == ["Id", "Name"]
        assert [cell.value for cell in ws[2]] == ["1", "Alice"]
        assert all(cell.data_type == "s" for row in ws.iter_rows() for cell in row)

    def test_stream_round_trip(
        self, serializer: ExcelSerializer, people: list[Person]
    ) -> None:
        buffer = io.BytesIO()
        serializer.export_to_excel(people, buffer)
        buffer.seek(0)

        assert serializer.import_from_excel(buffer, Person) == people

    def test_header_override(
        self,
        serializer: ExcelSerializer,
        people: list[Person],
        workbook_path: Path,
    ) -> None:
        serializer.export_to_excel(people, workbook_path, ["Key", "Full name"])

        ws = load_workbook(workbook_path).active
        assert [cell.value for cell in ws[1]] == ["Key", "Full name"]
        # Renamed columns no longer match any field
        assert serializer.import_from_excel(workbook_path, Person) == [
            Person(),
            Person(),
        ]

    def test_pydantic_records(
        self, serializer: ExcelSerializer, workbook_path: Path
    ) -> None:
        accounts = [Account(id=1, owner="Alice", balance=10.5)]
        serializer.export_to_excel(accounts, workbook_path)

        imported = serializer.import_from_excel(workbook_path, Account)
        assert [a.model_dump() for a in imported] == [a.model_dump() for a in accounts]

    def test_explicit_schema(
        self,
        serializer: ExcelSerializer,
        people: list[Person],
        workbook_path: Path,
    ) -> None:
        schema = RecordSchema.explicit(Person, [FieldDescriptor.attribute("Name")])

        serializer.export_to_excel(people, workbook_path, record_type=schema)

        assert serializer.import_from_excel(workbook_path, Person) == [
            Person(Name="Alice"),
            Person(Name="Bob"),
        ]

    def test_custom_conversion(self, workbook_path: Path) -> None:
        converter = TypeConverter()
        converter.register(
            timedelta,
            lambda text: timedelta(seconds=float(text)),
            lambda value: str(value.total_seconds()),
        )
        serializer = ExcelSerializer(converter)

        schema = RecordSchema.explicit(
            dict,
            [
                FieldDescriptor(
                    name="delay",
                    field_type=timedelta,
                    getter=lambda record: record["delay"],
                    setter=lambda record, value: record.__setitem__("delay", value),
                )
            ],
        )
        serializer.export_to_excel(
            [{"delay": timedelta(minutes=1)}], workbook_path, record_type=schema
        )

        assert serializer.import_from_excel(workbook_path, schema) == [
            {"delay": timedelta(seconds=60)}
        ]

    def test_sheet_name_setting(
        self,
        people: list[Person],
        workbook_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from excel_records import config

        monkeypatch.setattr(config.settings, "sheet_name", "People")
        ExcelSerializer().export_to_excel(people, workbook_path)

        assert load_workbook(workbook_path).sheetnames == ["People"]
        assert ExcelSerializer().import_from_excel(
            workbook_path, Person, sheet_name="People"
        ) == people


class TestFailures:
    """Tests for error propagation."""

    def test_export_empty_list(
        self, serializer: ExcelSerializer, workbook_path: Path
    ) -> None:
        with pytest.raises(EmptyInputError):
            serializer.export_to_excel([], workbook_path)
        assert not workbook_path.exists()

    def test_export_empty_list_with_record_type(
        self, serializer: ExcelSerializer
    ) -> None:
        with pytest.raises(EmptyInputError):
            serializer.export_rows([], record_type=Person)

    def test_bad_cell_aborts_import(
        self, serializer: ExcelSerializer, workbook_path: Path
    ) -> None:
        rows = [["Id", "Name", "Age"], ["1", "Alice", "30"], ["2", "Bob", "abc"]]
        WorkbookWriter().write_rows(rows, workbook_path)

        with pytest.raises(ConversionError) as exc_info:
            serializer.import_from_excel(workbook_path, Employee)

        assert exc_info.value.field_name == "Age"

    def test_import_is_logged(
        self,
        serializer: ExcelSerializer,
        people: list[Person],
        workbook_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        serializer.export_to_excel(people, workbook_path)

        with caplog.at_level(logging.INFO, logger="excel_records"):
            serializer.import_from_excel(workbook_path, Person)

        assert "Performance: import_from_excel" in caplog.text
        assert "records=2" in caplog.text


class TestRowsAndFrames:
    """Tests for the in-memory entry points."""

    def test_import_rows(self, serializer: ExcelSerializer) -> None:
        rows = [["Id", "Name"], ["1", "Alice"]]
        assert serializer.import_rows(rows, Person) == [Person(Id=1, Name="Alice")]

    def test_export_rows(
        self, serializer: ExcelSerializer, people: list[Person]
    ) -> None:
        assert serializer.export_rows(people) == [
            ["Id", "Name"],
            ["1", "Alice"],
            ["2", "Bob"],
        ]

    def test_dataframe_round_trip(self, serializer: ExcelSerializer) -> None:
        original = [_reading(), Reading(sensor="t2", limit=3)]

        frame = serializer.export_to_dataframe(original)

        assert list(frame.columns) == [
            "sensor",
            "count",
            "ratio",
            "amount",
            "enabled",
            "taken_at",
            "day",
            "status",
            "priority",
            "ident",
            "note",
            "limit",
        ]
        assert serializer.import_from_dataframe(frame, Reading) == original

    def test_import_typed_dataframe(self, serializer: ExcelSerializer) -> None:
        frame = pd.DataFrame({"Id": [1, 2], "Name": ["Alice", None]})

        records = serializer.import_from_dataframe(frame, Person)

        assert records == [Person(Id=1, Name="Alice"), Person(Id=2, Name="")]

    def test_integer_column_with_missing_values(
        self, serializer: ExcelSerializer
    ) -> None:
        frame = pd.DataFrame({"Id": [1, None]})

        records = serializer.import_from_dataframe(frame, Counted)

        assert records == [Counted(Id=1), Counted(Id=None)]
