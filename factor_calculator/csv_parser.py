"""
Tabular import parser for the Factor Calculator.

Turns delimited text into ``Row`` values.  Handles:

- One record per line; blank lines skipped
- Fields separated by comma *or* semicolon (both may appear)
- UTF-8 BOM markers (stripped by the file loader)
- Header lines, which fail numeric parsing and are rejected like any
  other malformed record

Each non-blank line yields a ``RecordOutcome``: either accepted with a
row, or rejected with a reason.  Callers decide whether to count,
warn about, or ignore rejections.
"""

import math
import re
import warnings
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .constants import (
    COL_GROSS_WEIGHT, COL_LENGTH, MIN_IMPORT_FIELDS, MAX_REPORTED_REJECTIONS,
)
from .data_model import Row

_FIELD_SEPARATOR = re.compile(r"[,;]")

REASON_TOO_FEW_FIELDS = "too few fields"
REASON_NON_NUMERIC = "non-numeric value"
REASON_NON_POSITIVE_WEIGHT = "non-positive weight"


@dataclass(frozen=True)
class RecordOutcome:
    """Result of parsing one input record.

    ``row`` is set for accepted records; ``reason`` for rejected ones.
    ``line_number`` is 1-based (0 for records that did not come from
    text, e.g. spreadsheet pairs).
    """
    line_number: int
    text: str
    row: Optional[Row] = None
    reason: str = ""

    @property
    def accepted(self) -> bool:
        return self.row is not None


@dataclass(frozen=True)
class ImportResult:
    """Accepted rows plus the records that were rejected."""
    rows: List[Row] = field(default_factory=list)
    rejected: List[RecordOutcome] = field(default_factory=list)
    source: str = ""

    @property
    def accepted_count(self) -> int:
        return len(self.rows)


# ── Number parsing ───────────────────────────────────────────────────────

def parse_decimal(text: str) -> float:
    """Parse a trimmed decimal string.

    Raises ``ValueError`` for empty, non-numeric or non-finite input
    (``inf`` and ``nan`` are not measurements).
    """
    s = text.strip()
    if not s:
        raise ValueError("empty string")
    if '_' in s:
        # float() accepts digit separators; measurement files never use them
        raise ValueError(f"non-numeric value: {s!r}")
    result = float(s)
    if not math.isfinite(result):
        raise ValueError(f"non-finite value: {s!r}")
    return result


def _build_outcome(
    line_number: int,
    text: str,
    gross_weight: float,
    length: float,
) -> RecordOutcome:
    if not gross_weight > 0:
        return RecordOutcome(line_number, text, reason=REASON_NON_POSITIVE_WEIGHT)
    return RecordOutcome(
        line_number, text, row=Row(gross_weight=gross_weight, length=length),
    )


# ── Text records ─────────────────────────────────────────────────────────

def parse_record(line: str, line_number: int = 0) -> Optional[RecordOutcome]:
    """Parse a single record; ``None`` for a blank line."""
    stripped = line.strip()
    if not stripped:
        return None

    tokens = _FIELD_SEPARATOR.split(stripped)
    if len(tokens) < MIN_IMPORT_FIELDS:
        return RecordOutcome(line_number, stripped, reason=REASON_TOO_FEW_FIELDS)

    try:
        gross_weight = parse_decimal(tokens[COL_GROSS_WEIGHT])
        length = parse_decimal(tokens[COL_LENGTH])
    except ValueError:
        return RecordOutcome(line_number, stripped, reason=REASON_NON_NUMERIC)

    return _build_outcome(line_number, stripped, gross_weight, length)


def parse_records(text: str) -> List[RecordOutcome]:
    """Parse every non-blank line of *text* into a ``RecordOutcome``."""
    outcomes: List[RecordOutcome] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        outcome = parse_record(line, line_number)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def parse_rows_text(text: str, source: str = "") -> ImportResult:
    """Parse delimited text into accepted rows and rejected records.

    Examples
    --------
    >>> result = parse_rows_text("10,5\\n20;8\\nabc,5")
    >>> [(r.gross_weight, r.length) for r in result.rows]
    [(10.0, 5.0), (20.0, 8.0)]
    >>> result.rejected[0].reason
    'non-numeric value'
    """
    outcomes = parse_records(text)
    return ImportResult(
        rows=[o.row for o in outcomes if o.accepted],
        rejected=[o for o in outcomes if not o.accepted],
        source=source,
    )


# ── Pre-extracted pairs (spreadsheets) ───────────────────────────────────

def rows_from_pairs(
    pairs: Iterable[Tuple[float, float]],
    source: str = "",
) -> ImportResult:
    """Apply the text-import contract to ``(gross_weight, length)`` pairs."""
    rows: List[Row] = []
    rejected: List[RecordOutcome] = []
    for gross_weight, length in pairs:
        text = f"{gross_weight},{length}"
        try:
            gw = parse_decimal(str(gross_weight))
            ln = parse_decimal(str(length))
        except ValueError:
            rejected.append(RecordOutcome(0, text, reason=REASON_NON_NUMERIC))
            continue
        outcome = _build_outcome(0, text, gw, ln)
        if outcome.accepted:
            rows.append(outcome.row)
        else:
            rejected.append(outcome)
    return ImportResult(rows=rows, rejected=rejected, source=source)


def warn_rejections(result: ImportResult, source_name: str) -> None:
    """Issue one aggregated warning naming the rejected records."""
    if not result.rejected:
        return
    examples = [
        f"line {o.line_number}: {o.text!r} ({o.reason})" if o.line_number
        else f"{o.text!r} ({o.reason})"
        for o in result.rejected[:MAX_REPORTED_REJECTIONS]
    ]
    detail = "; ".join(examples)
    if len(result.rejected) > MAX_REPORTED_REJECTIONS:
        detail += f" ... and {len(result.rejected) - MAX_REPORTED_REJECTIONS} more"
    warnings.warn(
        f"Skipped {len(result.rejected)} record(s) in '{source_name}': "
        f"{detail}.",
        stacklevel=3,
    )
