"""
Background file import for the Factor Calculator.

Reading and parsing a file runs on a ``QThread`` so the window stays
responsive.  The worker owns no controller state; it emits the parsed
``ImportResult`` and the main window appends the rows on the GUI
thread.
"""

import os
import warnings

from PySide6.QtCore import QThread, Signal

from .spreadsheet_reader import load_rows_from_file


class ImportWorkerThread(QThread):
    """One-shot worker that loads rows from *path*.

    Signals
    -------
    finished_result : Signal(object)
        Emits the ``ImportResult`` when loading succeeds.
    error_occurred : Signal(str)
        Emits a descriptive error string if loading fails.
    warning_raised : Signal(str)
        Emits data-quality warnings (skipped records) for the status bar.
    """

    finished_result = Signal(object)
    error_occurred = Signal(str)
    warning_raised = Signal(str)

    def __init__(self, path: str, parent=None):
        super().__init__(parent)
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def run(self):  # noqa: D401 – Qt override
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                result = load_rows_from_file(self._path)
        except Exception as exc:
            self.error_occurred.emit(
                f"{os.path.basename(self._path)}: {type(exc).__name__}: {exc}"
            )
            return
        for w in caught:
            self.warning_raised.emit(str(w.message))
        self.finished_result.emit(result)
