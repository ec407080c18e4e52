"""
Aggregation controller for the Factor Calculator.

Owns the ordered row sequence shown in the table, runs group
computations through ``statistics_engine`` and keeps the latest
``Result``.  Every row receives a stable ``row_id`` when it enters the
sequence; outlier flags are re-applied by that id, so duplicate
measurements are classified independently.

Public operations never raise for user-level conditions.  They return
an ``Outcome`` and leave state untouched when rejected.  The sequence
always holds at least one row.
"""

import itertools
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from .audit_log import AuditLog, audit_log
from .constants import MSG_NO_VALID_ROWS, format_decimal, format_percent
from .csv_parser import ImportResult, parse_rows_text
from .data_model import Result, Row
from .history import HistoryLog
from . import statistics_engine

REASON_INDEX_OUT_OF_RANGE = "index out of range"
REASON_UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Outcome:
    """Typed result of a controller operation.

    ``count`` carries the number of rows affected where that is
    meaningful (imports, empty-row removal).
    """
    ok: bool
    reason: str = ""
    count: int = 0


class FactorController:
    """Mutable row collection plus the latest group result.

    Parameters
    ----------
    history : HistoryLog, optional
        Receives the mean of every successful group computation.
    audit : AuditLog, optional
        Action trail; defaults to the shared module instance.
    """

    def __init__(self, history: Optional[HistoryLog] = None,
                 audit: Optional[AuditLog] = None):
        self._ids = itertools.count(1)
        self._history = history
        self._audit = audit if audit is not None else audit_log
        self._rows: List[Row] = [self._new_row()]
        self._result: Optional[Result] = None
        self._error_message: Optional[str] = None

    # ── State accessors ──────────────────────────────────────────────

    @property
    def rows(self) -> Tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def result(self) -> Optional[Result]:
        return self._result

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def history(self) -> Optional[HistoryLog]:
        return self._history

    def consume_error(self) -> Optional[str]:
        """Return the pending error message once, then clear it."""
        message, self._error_message = self._error_message, None
        return message

    # ── Internal helpers ─────────────────────────────────────────────

    def _new_row(self, gross_weight: float = 0.0, length: float = 0.0) -> Row:
        return Row(gross_weight=gross_weight, length=length, row_id=next(self._ids))

    def _ensure_not_empty(self):
        if not self._rows:
            self._rows.append(self._new_row())

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._rows)

    # ── Row editing ──────────────────────────────────────────────────

    def add_empty_row(self) -> Outcome:
        self._rows.append(self._new_row())
        return Outcome(True, count=1)

    def update_row(self, index: int, gross_weight: float, length: float) -> Outcome:
        """Replace the measurements of row *index*.

        Writing back the values a row already holds is a no-op.
        """
        if not self._in_range(index):
            return Outcome(False, REASON_INDEX_OUT_OF_RANGE)
        current = self._rows[index]
        if current.gross_weight == gross_weight and current.length == length:
            return Outcome(False, REASON_UNCHANGED)
        self._rows[index] = replace(current, gross_weight=gross_weight, length=length)
        return Outcome(True, count=1)

    def remove_row(self, index: int) -> Outcome:
        if not self._in_range(index):
            return Outcome(False, REASON_INDEX_OUT_OF_RANGE)
        del self._rows[index]
        self._ensure_not_empty()
        return Outcome(True, count=1)

    # ── Group computation ────────────────────────────────────────────

    def compute_group_factor(self) -> Outcome:
        """Aggregate every valid row into a new ``Result``.

        With no valid rows the error message is set and nothing else
        changes.  On success the outlier flags of valid rows are
        replaced; invalid rows keep whatever they had.
        """
        valid_rows = [r for r in self._rows if r.is_valid()]
        if not valid_rows:
            self._error_message = MSG_NO_VALID_ROWS
            self._audit.log_warning(MSG_NO_VALID_ROWS)
            return Outcome(False, MSG_NO_VALID_ROWS)

        ratios = [r.compute_ratio() for r in valid_rows]
        summary = statistics_engine.summarize(ratios)
        classified = statistics_engine.classify_outliers(
            valid_rows, summary.mean, summary.std_dev,
        )

        by_id = {r.row_id: r for r in classified}
        self._rows = [by_id.get(r.row_id, r) for r in self._rows]

        self._result = Result(
            mean_ratio=summary.mean,
            std_dev=summary.std_dev,
            error_margin_percent=summary.error_margin_percent,
            valid_row_count=len(valid_rows),
            rows=tuple(self._rows),
        )
        self._error_message = None

        self._audit.log_computation(
            "Group factor",
            f"rows={len(valid_rows)} mean={format_decimal(summary.mean)} "
            f"std_dev={format_decimal(summary.std_dev)} "
            f"error_margin={format_percent(summary.error_margin_percent)} "
            f"outliers={self._result.outlier_count}",
        )
        if self._history is not None:
            try:
                self._history.record(summary.mean)
            except OSError as exc:
                self._audit.log_warning(f"History not saved: {exc}")
        return Outcome(True, count=len(valid_rows))

    def convert_weight_to_length(self, weight: float) -> float:
        """Estimate metres for *weight* using the current group factor."""
        if self._result is None or not weight > 0:
            return 0.0
        return weight * self._result.mean_ratio

    # ── Bulk actions ─────────────────────────────────────────────────

    def clear_outliers(self) -> Outcome:
        """Zero every row and flag while keeping the row count."""
        self._rows = [
            replace(r, gross_weight=0.0, length=0.0, is_outlier=False)
            for r in self._rows
        ]
        self._ensure_not_empty()
        self._result = None
        self._audit.log_action("Cleared all values", f"rows={len(self._rows)}")
        return Outcome(True, count=len(self._rows))

    def remove_empty_rows(self) -> Outcome:
        kept = [r for r in self._rows if not r.is_empty()]
        removed = len(self._rows) - len(kept)
        if removed == 0:
            return Outcome(False, "no empty rows")
        self._rows = kept
        self._ensure_not_empty()
        self._result = None
        self._audit.log_action("Removed empty rows", f"removed={removed}")
        return Outcome(True, count=removed)

    def reset_all(self) -> Outcome:
        self._rows = [self._new_row()]
        self._result = None
        self._error_message = None
        self._audit.log_action("Reset all rows")
        return Outcome(True, count=1)

    # ── Import ───────────────────────────────────────────────────────

    def import_rows(self, parsed_rows: Iterable[Row], source: str = "") -> Outcome:
        """Append imported rows with fresh ids; existing rows are kept."""
        added = [self._new_row(r.gross_weight, r.length) for r in parsed_rows]
        self._rows.extend(added)
        self._audit.log_data_load(source or "import", f"rows={len(added)}")
        return Outcome(bool(added), "" if added else "no rows", count=len(added))

    def import_result(self, result: ImportResult) -> Outcome:
        return self.import_rows(result.rows, source=result.source)

    def import_text(self, text: str, source: str = "") -> Outcome:
        """Parse delimited text and append the accepted rows."""
        return self.import_result(parse_rows_text(text, source=source))
