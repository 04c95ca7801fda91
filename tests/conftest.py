from __future__ import annotations

from pathlib import Path

import pytest

from excel_records import ExcelSerializer
from excel_records.services.converter import TypeConverter
from excel_records.utils.logging import clear_context
from tests.fixtures import Person, make_people


@pytest.fixture(autouse=True)
def _reset_log_context() -> None:
    clear_context()


@pytest.fixture
def people() -> list[Person]:
    return make_people()


@pytest.fixture
def converter() -> TypeConverter:
    return TypeConverter()


@pytest.fixture
def serializer() -> ExcelSerializer:
    return ExcelSerializer(validate_header_override=False)


@pytest.fixture
def workbook_path(tmp_path: Path) -> Path:
    return tmp_path / "records.xlsx"
