"""
File loading for row import.

``.xlsx`` / ``.xlsm`` workbooks are read with openpyxl; every other
file is treated as delimited text and handed to ``csv_parser``.  Both
paths end in the same ``ImportResult``.

Workbook layout: the active sheet, first row is a header, column A is
the gross weight and column B the length.  A sheet row counts only if
both cells hold positive numbers.
"""

import os
from numbers import Real
from typing import Iterator, List, Optional, Tuple

from .constants import (
    COL_GROSS_WEIGHT, COL_LENGTH, SPREADSHEET_EXTENSIONS,
    LEGACY_SPREADSHEET_EXTENSIONS,
)
from .csv_parser import (
    ImportResult, parse_rows_text, rows_from_pairs, warn_rejections,
)


def _numeric_cell(value) -> Optional[float]:
    """Return the cell as a float, or ``None`` if it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def iter_sheet_pairs(rows) -> Iterator[Tuple[float, float]]:
    """Yield ``(gross_weight, length)`` from sheet rows, skipping the header.

    *rows* is any iterable of cell-value sequences, as produced by
    ``worksheet.iter_rows(values_only=True)``.
    """
    for index, row in enumerate(rows):
        if index == 0:
            continue
        if row is None or len(row) <= COL_LENGTH:
            continue
        gross_weight = _numeric_cell(row[COL_GROSS_WEIGHT])
        length = _numeric_cell(row[COL_LENGTH])
        if gross_weight is None or length is None:
            continue
        if gross_weight > 0 and length > 0:
            yield gross_weight, length


def read_spreadsheet_pairs(path: str) -> List[Tuple[float, float]]:
    """Read the active sheet of an ``.xlsx`` workbook into measurement pairs."""
    import openpyxl
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.active
        return list(iter_sheet_pairs(ws.iter_rows(values_only=True)))
    finally:
        wb.close()


def load_rows_from_file(path: str) -> ImportResult:
    """Load rows from a CSV/text file or an ``.xlsx`` workbook.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file is empty or is a legacy ``.xls`` workbook.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Import file not found: {path}")

    name = os.path.basename(path)
    ext = os.path.splitext(name)[1].lower()

    if ext in LEGACY_SPREADSHEET_EXTENSIONS:
        raise ValueError(
            f"'{name}' is a legacy .xls workbook. Save it as .xlsx or CSV "
            f"and import again."
        )

    if ext in SPREADSHEET_EXTENSIONS:
        result = rows_from_pairs(read_spreadsheet_pairs(path), source=name)
    else:
        with open(path, 'r', encoding='utf-8-sig') as fh:
            text = fh.read()
        if not text.strip():
            raise ValueError(f"'{name}' is an empty file.")
        result = parse_rows_text(text, source=name)

    warn_rejections(result, name)
    return result
