"""
Data model for the Factor Calculator.

Immutable dataclasses for measurement rows, group results and history
entries.  Rows are never mutated in place: the controller replaces a
row with an updated copy that keeps the same ``row_id``, so outlier
flags can be re-applied by identity even when two rows hold identical
measurements.

The ``ratio`` field is always derived from the two measurements and
cannot be passed to the constructor.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .constants import MAX_HISTORY_TIMESTAMP_MS

UNASSIGNED_ID = -1


@dataclass(frozen=True)
class Row:
    """A single measurement pair and its derived ratio.

    Parameters
    ----------
    gross_weight : float
        Gross weight ("Peso Bruto").  A row is valid only when > 0.
    length : float
        Length in metres ("Metros").
    is_outlier : bool
        Set by group computation; meaningless before the first one.
    row_id : int
        Stable identity assigned by ``FactorController``.  Rows built
        by the import parser carry ``UNASSIGNED_ID`` until appended.
    ratio : float
        ``length / gross_weight`` for valid rows, else ``0.0``.
    """
    gross_weight: float = 0.0
    length: float = 0.0
    is_outlier: bool = False
    row_id: int = UNASSIGNED_ID
    ratio: float = field(init=False, default=0.0)

    def __post_init__(self):
        object.__setattr__(self, 'ratio', self.compute_ratio())

    def compute_ratio(self) -> float:
        """Return ``length / gross_weight``, or ``0.0`` for invalid rows."""
        if self.gross_weight > 0:
            return self.length / self.gross_weight
        return 0.0

    def is_valid(self) -> bool:
        """A row takes part in group computation only if its weight is > 0."""
        return self.gross_weight > 0

    def is_empty(self) -> bool:
        return self.gross_weight == 0 and self.length == 0


@dataclass(frozen=True)
class Result:
    """Output of one group computation.

    ``rows`` is a snapshot of the full row sequence (valid and invalid
    rows alike) with outlier flags applied.  A new computation produces
    a new ``Result``; an existing one is never modified.
    """
    mean_ratio: float
    std_dev: float
    error_margin_percent: float
    valid_row_count: int
    rows: Tuple[Row, ...] = ()

    @property
    def outlier_count(self) -> int:
        return sum(1 for r in self.rows if r.is_outlier)

    def to_payload(self) -> Dict[str, float]:
        """Values handed to the result view."""
        return {
            'mean_ratio': self.mean_ratio,
            'error_margin_percent': self.error_margin_percent,
            'valid_row_count': self.valid_row_count,
            'std_dev': self.std_dev,
        }


@dataclass(frozen=True)
class HistoryEntry:
    """One past group factor.

    Parameters
    ----------
    mean_ratio : float
        Group mean ratio at the time of computation.
    timestamp : int
        Epoch milliseconds.
    """
    mean_ratio: float
    timestamp: int

    def to_dict(self) -> dict:
        return {'meanRatio': self.mean_ratio, 'timestamp': self.timestamp}

    @staticmethod
    def from_dict(d: dict) -> 'HistoryEntry':
        """Build an entry from its persisted form.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` for records
        of the wrong shape or with values no computation could produce
        (non-finite mean, timestamp outside years 1970 to 9999);
        ``HistoryLog`` treats those as corrupt data.
        """
        mean_ratio = d['meanRatio']
        timestamp = d['timestamp']
        if isinstance(mean_ratio, bool) or isinstance(timestamp, bool):
            raise TypeError("boolean is not a valid history value")
        mean_ratio = float(mean_ratio)
        if not math.isfinite(mean_ratio):
            raise ValueError(f"non-finite history mean: {mean_ratio!r}")
        if isinstance(timestamp, float) and not math.isfinite(timestamp):
            raise ValueError(f"non-finite history timestamp: {timestamp!r}")
        timestamp = int(timestamp)
        if not 0 <= timestamp <= MAX_HISTORY_TIMESTAMP_MS:
            raise ValueError(f"history timestamp out of range: {timestamp}")
        return HistoryEntry(mean_ratio=mean_ratio, timestamp=timestamp)
