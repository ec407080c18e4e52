import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from factor_calculator.audit_log import AuditLog  # noqa: E402
from factor_calculator.controller import FactorController  # noqa: E402
from factor_calculator.history import HistoryLog, KeyValueStore  # noqa: E402


class FakeClock:
    """Monotonic clock advancing one second per call."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(str(tmp_path / "prefs.json"))


@pytest.fixture
def history(store: KeyValueStore) -> HistoryLog:
    return HistoryLog(store, clock=FakeClock())


@pytest.fixture
def audit() -> AuditLog:
    return AuditLog()


@pytest.fixture
def controller(audit: AuditLog) -> FactorController:
    return FactorController(audit=audit)


def fill(controller: FactorController, pairs):
    """Enter *pairs* into the controller the way a user would."""
    controller.reset_all()
    for i, (weight, length) in enumerate(pairs):
        if i > 0:
            controller.add_empty_row()
        controller.update_row(i, weight, length)
