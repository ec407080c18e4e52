import datetime
import json
import math
from pathlib import Path

import pytest

from factor_calculator.constants import (
    HISTORY_DATE_PLACEHOLDER, HISTORY_KEY, MAX_HISTORY,
)
from factor_calculator.history import HistoryLog, KeyValueStore, format_timestamp

from conftest import FakeClock


def test_store_round_trip_and_remove(store):
    assert store.get_string("k") is None
    assert store.get_string("k", "fallback") == "fallback"
    store.put_string("k", "v")
    store.put_string("other", "w")
    assert store.get_string("k") == "v"
    store.remove("k")
    assert store.get_string("k") is None
    assert store.get_string("other") == "w"


def test_store_creates_missing_folder(tmp_path: Path):
    store = KeyValueStore(str(tmp_path / "nested" / "dir" / "prefs.json"))
    store.put_string("k", "v")
    assert KeyValueStore(store.path).get_string("k") == "v"


def test_corrupt_store_file_reads_as_empty(tmp_path: Path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    store = KeyValueStore(str(path))
    with pytest.warns(UserWarning, match="unreadable"):
        assert store.get_string("k") is None


def test_empty_history(history):
    assert history.list() == []


def test_record_inserts_most_recent_first(history):
    first = history.record(0.5)
    second = history.record(0.4)
    assert history.list() == [second, first]
    assert second.timestamp > first.timestamp


def test_record_keeps_only_newest_entries(history):
    for value in range(1, 7):
        history.record(float(value))
    entries = history.list()
    assert len(entries) == MAX_HISTORY
    assert [e.mean_ratio for e in entries] == [6.0, 5.0, 4.0, 3.0, 2.0]


def test_history_persists_across_instances(store):
    HistoryLog(store, clock=FakeClock()).record(0.75)
    entries = HistoryLog(store).list()
    assert len(entries) == 1
    assert math.isclose(entries[0].mean_ratio, 0.75)


def test_persisted_format(store, history):
    entry = history.record(0.5)
    data = json.loads(store.get_string(HISTORY_KEY))
    assert data == [{'meanRatio': 0.5, 'timestamp': entry.timestamp}]


def test_timestamp_is_epoch_millis(store):
    log = HistoryLog(store, clock=lambda: 1_700_000_000.123)
    assert log.record(1.0).timestamp == 1_700_000_000_123


@pytest.mark.parametrize("raw", [
    "not json",
    json.dumps({"meanRatio": 1.0, "timestamp": 1}),
    json.dumps([{"meanRatio": 1.0}]),
    json.dumps([1, 2, 3]),
    '[{"meanRatio": 1.0, "timestamp": Infinity}]',
    '[{"meanRatio": 1.0, "timestamp": 1e400}]',
    '[{"meanRatio": 1.0, "timestamp": 99999999999999999999}]',
    '[{"meanRatio": 1.0, "timestamp": -5}]',
    '[{"meanRatio": NaN, "timestamp": 1700000000000}]',
    '[{"meanRatio": 1' + "0" * 400 + ', "timestamp": 1700000000000}]',
])
def test_corrupt_history_reads_as_empty(store, history, raw):
    store.put_string(HISTORY_KEY, raw)
    with pytest.warns(UserWarning):
        assert history.list() == []


def test_record_over_corrupt_history_starts_fresh(store, history):
    store.put_string(HISTORY_KEY, "garbage")
    with pytest.warns(UserWarning):
        history.record(0.3)
    assert [e.mean_ratio for e in history.list()] == [0.3]


def test_clear(history):
    history.record(0.5)
    history.clear()
    assert history.list() == []


def test_format_timestamp():
    dt = datetime.datetime(2026, 3, 7, 14, 5)
    assert format_timestamp(int(dt.timestamp() * 1000)) == "07/03/2026 14:05"


@pytest.mark.parametrize("timestamp_ms", [99999999999999999999, 10 ** 30])
def test_format_timestamp_out_of_range_uses_placeholder(timestamp_ms):
    assert format_timestamp(timestamp_ms) == HISTORY_DATE_PLACEHOLDER
