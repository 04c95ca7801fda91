"""Spreadsheet column addressing.

Columns are numbered from 1 and labelled in bijective base-26: ``A`` is 1,
``Z`` is 26, ``AA`` is 27 and there is no zero digit.
"""

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def column_index(label: str) -> int:
    """Return the 1-based column number for a letter label.

    Matching is case-insensitive. Reading stops at the first character that
    is not a letter, so an A1-style reference such as ``"AB12"`` yields the
    column of ``"AB"``. A label that does not start with a letter yields 0.

    Args:
        label: Column label, optionally followed by a row number.

    Returns:
        Column number, or 0 if the label has no leading letters.
    """
    index = 0
    for char in label.upper():
        if char not in LETTERS:
            break
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def get_column_name(index: int) -> str:
    """Return the letter label for a 1-based column number.

    Indices below 1 have no label and yield an empty string.

    Args:
        index: Column number.

    Returns:
        Letter label such as ``"A"`` or ``"AA"``.
    """
    name = ""
    while index > 0:
        index -= 1
        name = LETTERS[index % 26] + name
        index //= 26
    return name


def cell_reference(column: int, row: int) -> str:
    """Build an A1-style reference from 1-based column and row numbers."""
    if column < 1 or row < 1:
        raise ValueError(f"Column and row must be >= 1, got ({column}, {row})")
    return f"{get_column_name(column)}{row}"
