"""pandas DataFrame adapters for rows of cell text."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from excel_records.services.converter import TypeConverter


def rows_from_dataframe(
    frame: pd.DataFrame, converter: TypeConverter | None = None
) -> list[list[str | None]]:
    """Turn a DataFrame into a header row plus data rows of cell text.

    Column labels form the header. Missing values (NaN, None, NaT) become
    absent cells; other values are rendered with the converter.
    """
    converter = converter or TypeConverter()
    rows: list[list[str | None]] = [[str(label) for label in frame.columns]]
    # Nullable dtypes keep integer columns with gaps as integers; object
    # dtype then boxes the scalars into plain Python values.
    frame = frame.convert_dtypes()
    values = frame.astype(object).where(frame.notna(), None)
    for record in values.itertuples(index=False, name=None):
        rows.append(
            [None if value is None else converter.to_text(value) for value in record]
        )
    return rows


def rows_to_dataframe(rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Build a DataFrame of text from a header row plus data rows."""
    if not rows:
        return pd.DataFrame()
    header = list(rows[0])
    return pd.DataFrame([list(row) for row in rows[1:]], columns=header, dtype=object)
