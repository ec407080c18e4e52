import math
from dataclasses import FrozenInstanceError, replace

import pytest

from factor_calculator.constants import format_decimal, format_percent
from factor_calculator.data_model import HistoryEntry, Result, Row, UNASSIGNED_ID


def test_ratio_is_derived_from_measurements():
    row = Row(gross_weight=10.0, length=5.0)
    assert math.isclose(row.ratio, 0.5)
    assert row.compute_ratio() == row.ratio
    assert row.row_id == UNASSIGNED_ID


def test_zero_weight_gives_zero_ratio_and_invalid_row():
    row = Row(gross_weight=0.0, length=3.0)
    assert row.ratio == 0.0
    assert not row.is_valid()
    assert not row.is_empty()


def test_default_row_is_empty():
    row = Row()
    assert row.is_empty()
    assert row.ratio == 0.0
    assert row.is_outlier is False


def test_replace_recomputes_ratio_and_keeps_identity():
    row = Row(gross_weight=10.0, length=5.0, row_id=7)
    updated = replace(row, length=20.0)
    assert updated.row_id == 7
    assert math.isclose(updated.ratio, 2.0)


def test_rows_are_immutable():
    row = Row(gross_weight=1.0, length=1.0)
    with pytest.raises(FrozenInstanceError):
        row.length = 2.0


def test_result_payload_and_outlier_count():
    rows = (
        Row(10.0, 5.0, row_id=1),
        Row(10.0, 50.0, is_outlier=True, row_id=2),
    )
    result = Result(
        mean_ratio=2.75, std_dev=2.25, error_margin_percent=81.8,
        valid_row_count=2, rows=rows,
    )
    assert result.outlier_count == 1
    assert result.to_payload() == {
        'mean_ratio': 2.75,
        'error_margin_percent': 81.8,
        'valid_row_count': 2,
        'std_dev': 2.25,
    }


def test_history_entry_serialization():
    entry = HistoryEntry(mean_ratio=0.45, timestamp=1_700_000_000_000)
    d = entry.to_dict()
    assert d == {'meanRatio': 0.45, 'timestamp': 1_700_000_000_000}
    assert HistoryEntry.from_dict(d) == entry


@pytest.mark.parametrize("bad", [
    {'meanRatio': 1.0},
    {'timestamp': 1},
    {'meanRatio': 'abc', 'timestamp': 1},
    {'meanRatio': True, 'timestamp': 1},
])
def test_history_entry_rejects_bad_records(bad):
    with pytest.raises((KeyError, TypeError, ValueError)):
        HistoryEntry.from_dict(bad)


def test_display_formats():
    assert format_decimal(0.5) == "0.5000"
    assert format_percent(12.3456) == "12.35%"
