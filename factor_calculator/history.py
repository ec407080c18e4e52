"""
History of past group factors.

``KeyValueStore`` is a tiny JSON-file preferences store (string keys,
string values).  ``HistoryLog`` keeps the last ``MAX_HISTORY`` group
means under a single key, most recent first.

Missing or unreadable data never raises: the store reads as empty and
the history as an empty list.
"""

import datetime
import json
import os
import tempfile
import time
import warnings
from typing import Callable, Dict, List, Optional

from .constants import (
    HISTORY_KEY, MAX_HISTORY, HISTORY_DATE_FORMAT, HISTORY_DATE_PLACEHOLDER,
)
from .data_model import HistoryEntry


class KeyValueStore:
    """JSON-file backed map of string keys to string values.

    Every write replaces the whole file via a temporary file and
    ``os.replace``.
    """

    def __init__(self, path: str):
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.isfile(self._path):
            return {}
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            warnings.warn(
                f"Preferences file '{os.path.basename(self._path)}' is "
                f"unreadable ({exc}); treating it as empty.",
                stacklevel=3,
            )
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        folder = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=folder, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._read_all().get(key, default)

    def put_string(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class HistoryLog:
    """Bounded, most-recent-first log of group factors.

    Parameters
    ----------
    store : KeyValueStore
        Where the serialized history lives.
    clock : callable
        Returns seconds since the epoch; replaced in tests.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock

    def record(self, mean_ratio: float) -> HistoryEntry:
        """Insert a new entry at the front and keep the newest ``MAX_HISTORY``."""
        entry = HistoryEntry(
            mean_ratio=float(mean_ratio),
            timestamp=int(self._clock() * 1000),
        )
        entries = [entry] + self.list()
        entries = entries[:MAX_HISTORY]
        self._store.put_string(
            HISTORY_KEY, json.dumps([e.to_dict() for e in entries]),
        )
        return entry

    def list(self) -> List[HistoryEntry]:
        """Return persisted entries, most recent first (empty on bad data)."""
        raw = self._store.get_string(HISTORY_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("history is not a list")
            return [HistoryEntry.from_dict(d) for d in data]
        except (ValueError, KeyError, TypeError, OverflowError) as exc:
            warnings.warn(
                f"Discarding unreadable history data ({exc}).",
                stacklevel=2,
            )
            return []

    def clear(self) -> None:
        self._store.remove(HISTORY_KEY)


def format_timestamp(timestamp_ms: int) -> str:
    """Format epoch milliseconds as local ``dd/mm/YYYY HH:MM``.

    Timestamps the platform cannot represent yield a placeholder.
    """
    try:
        dt = datetime.datetime.fromtimestamp(timestamp_ms / 1000.0)
    except (OverflowError, OSError, ValueError):
        return HISTORY_DATE_PLACEHOLDER
    return dt.strftime(HISTORY_DATE_FORMAT)
