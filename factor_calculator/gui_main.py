"""
Main window for the Factor Calculator.

Hosts the editable row table (left) and the history panel (right) in
a horizontal splitter, with a menu bar and status bar.  All state
lives in ``FactorController``; the table is rebuilt from it after
every action.
"""

import os
import sys

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QGroupBox,
    QPushButton, QTableWidget, QTableWidgetItem, QHeaderView, QListWidget,
    QFileDialog, QMessageBox, QLabel,
)
from PySide6.QtGui import QAction, QColor
from PySide6.QtCore import Qt, QStandardPaths

from . import APP_NAME, APP_VERSION
from .audit_log import audit_log
from .constants import (
    DARK_COLORS, PREFS_FILENAME, COL_GROSS_WEIGHT, COL_LENGTH,
    MSG_INVALID_FORMAT, MSG_IMPORT_OK, MSG_IMPORT_ERROR,
    MSG_EMPTY_ROWS_REMOVED, MSG_NO_EMPTY_ROWS, MSG_VALUES_CLEARED,
    format_decimal,
)
from .controller import FactorController
from .csv_parser import parse_decimal, rows_from_pairs
from .example_data import generate_example_pairs
from .export import export_audit_log
from .gui_result_dialog import ResultDialog
from .history import HistoryLog, KeyValueStore, format_timestamp
from .import_worker import ImportWorkerThread
from .theme import COMPUTE_BUTTON, HISTORY_EMPTY_LABEL

COL_RATIO = 2


def default_prefs_path() -> str:
    folder = QStandardPaths.writableLocation(QStandardPaths.AppConfigLocation)
    if not folder:
        folder = os.path.join(os.path.expanduser("~"), ".factor_calculator")
    return os.path.join(folder, PREFS_FILENAME)


class FactorMainWindow(QMainWindow):
    """Main window: row entry, group computation and history."""

    def __init__(self, prefs_path: str = None):
        super().__init__()
        store = KeyValueStore(prefs_path or default_prefs_path())
        self._controller = FactorController(history=HistoryLog(store))
        self._worker = None
        self._suppress_cell_edits = False

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(900, 600)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

        self._refresh_rows()
        self._refresh_history()
        self.statusBar().showMessage("Ready: enter rows or import a file")

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel: rows and actions
        grp_rows = QGroupBox("Registros")
        rows_layout = QVBoxLayout(grp_rows)
        self._table = QTableWidget(0, 3)
        self._table.setHorizontalHeaderLabels(["Peso Bruto", "Metros", "Factor"])
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self._table.setAlternatingRowColors(True)
        rows_layout.addWidget(self._table, 1)

        btn_row1 = QHBoxLayout()
        self._btn_add = QPushButton("Agregar Fila")
        self._btn_delete = QPushButton("Eliminar Fila")
        self._btn_remove_empty = QPushButton("Eliminar Filas Vacías")
        btn_row1.addWidget(self._btn_add)
        btn_row1.addWidget(self._btn_delete)
        btn_row1.addWidget(self._btn_remove_empty)
        rows_layout.addLayout(btn_row1)

        btn_row2 = QHBoxLayout()
        self._btn_import = QPushButton("Importar CSV / Excel...")
        self._btn_clear = QPushButton("Limpiar Valores")
        self._btn_reset = QPushButton("Reiniciar")
        btn_row2.addWidget(self._btn_import)
        btn_row2.addWidget(self._btn_clear)
        btn_row2.addWidget(self._btn_reset)
        rows_layout.addLayout(btn_row2)

        self.compute_button = QPushButton("Calcular Factor del Grupo")
        self.compute_button.setObjectName(COMPUTE_BUTTON)
        rows_layout.addWidget(self.compute_button)

        # Right panel: history
        grp_history = QGroupBox("Historial")
        hist_layout = QVBoxLayout(grp_history)
        self._history_list = QListWidget()
        hist_layout.addWidget(self._history_list, 1)
        self._lbl_history_empty = QLabel("Sin cálculos previos")
        self._lbl_history_empty.setObjectName(HISTORY_EMPTY_LABEL)
        hist_layout.addWidget(self._lbl_history_empty)
        self._btn_clear_history = QPushButton("Borrar Historial")
        hist_layout.addWidget(self._btn_clear_history)

        splitter.addWidget(grp_rows)
        splitter.addWidget(grp_history)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([620, 280])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_import = QAction("Import Rows...", self)
        act_import.triggered.connect(lambda *_: self._on_import())
        file_menu.addAction(act_import)

        act_audit = QAction("Save Audit Log...", self)
        act_audit.triggered.connect(lambda *_: self._save_audit_log())
        file_menu.addAction(act_audit)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── Examples menu ────────────────────────────────────────────
        examples_menu = menubar.addMenu("Examples")

        act_load_example = QAction("Load Example Rows", self)
        act_load_example.triggered.connect(lambda *_: self._load_example())
        examples_menu.addAction(act_load_example)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")

        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        # Lambda wrappers absorb the bool argument from clicked(bool)
        self._btn_add.clicked.connect(lambda *_: self._on_add_row())
        self._btn_delete.clicked.connect(lambda *_: self._on_delete_row())
        self._btn_remove_empty.clicked.connect(lambda *_: self._on_remove_empty())
        self._btn_import.clicked.connect(lambda *_: self._on_import())
        self._btn_clear.clicked.connect(lambda *_: self._on_clear_values())
        self._btn_reset.clicked.connect(lambda *_: self._on_reset())
        self._btn_clear_history.clicked.connect(lambda *_: self._on_clear_history())
        self.compute_button.clicked.connect(lambda *_: self._on_compute())
        self._table.cellChanged.connect(self._on_cell_changed)

    # ── Table sync ───────────────────────────────────────────────────

    def _refresh_rows(self):
        rows = self._controller.rows
        self._suppress_cell_edits = True
        try:
            self._table.setRowCount(len(rows))
            outlier_bg = QColor(DARK_COLORS['red'])
            for i, row in enumerate(rows):
                weight_item = QTableWidgetItem(f"{row.gross_weight:g}")
                length_item = QTableWidgetItem(f"{row.length:g}")
                ratio_item = QTableWidgetItem(format_decimal(row.ratio))
                ratio_item.setFlags(ratio_item.flags() & ~Qt.ItemIsEditable)
                if row.is_outlier:
                    for item in (weight_item, length_item, ratio_item):
                        item.setBackground(outlier_bg)
                self._table.setItem(i, COL_GROSS_WEIGHT, weight_item)
                self._table.setItem(i, COL_LENGTH, length_item)
                self._table.setItem(i, COL_RATIO, ratio_item)
        finally:
            self._suppress_cell_edits = False

    def _refresh_history(self):
        self._history_list.clear()
        history = self._controller.history
        entries = history.list() if history is not None else []
        for entry in entries:
            self._history_list.addItem(
                f"{format_timestamp(entry.timestamp)}    "
                f"{format_decimal(entry.mean_ratio)}"
            )
        self._lbl_history_empty.setVisible(not entries)

    def _cell_value(self, row: int, col: int) -> float:
        item = self._table.item(row, col)
        text = item.text().strip().replace(',', '.') if item is not None else ""
        if not text:
            return 0.0
        return parse_decimal(text)

    # ── Slots ────────────────────────────────────────────────────────

    def _on_cell_changed(self, row, col):
        """Push an edited cell into the controller; reject non-numeric text."""
        if self._suppress_cell_edits or col == COL_RATIO:
            return
        try:
            weight = self._cell_value(row, COL_GROSS_WEIGHT)
            length = self._cell_value(row, COL_LENGTH)
        except ValueError:
            self.statusBar().showMessage(
                f"Rejected non-numeric value in row {row + 1}", 5000,
            )
            self._refresh_rows()
            return
        if weight < 0 or length < 0:
            self.statusBar().showMessage(
                f"Negative values are not allowed (row {row + 1})", 5000,
            )
            self._refresh_rows()
            return
        if self._controller.update_row(row, weight, length).ok:
            self._refresh_rows()

    def _on_add_row(self):
        self._controller.add_empty_row()
        self._refresh_rows()
        self._table.scrollToBottom()

    def _on_delete_row(self):
        index = self._table.currentRow()
        if self._controller.remove_row(index).ok:
            self._refresh_rows()
        else:
            self.statusBar().showMessage("Select a row to delete", 3000)

    def _on_remove_empty(self):
        outcome = self._controller.remove_empty_rows()
        self._refresh_rows()
        if outcome.ok:
            self.statusBar().showMessage(
                MSG_EMPTY_ROWS_REMOVED.format(count=outcome.count), 5000,
            )
        else:
            self.statusBar().showMessage(MSG_NO_EMPTY_ROWS, 5000)

    def _on_clear_values(self):
        self._controller.clear_outliers()
        self._refresh_rows()
        self.statusBar().showMessage(MSG_VALUES_CLEARED, 5000)

    def _on_reset(self):
        self._controller.reset_all()
        self._refresh_rows()
        self.statusBar().showMessage("All rows reset", 3000)

    def _on_clear_history(self):
        history = self._controller.history
        if history is not None:
            history.clear()
        self._refresh_history()

    def _on_compute(self):
        outcome = self._controller.compute_group_factor()
        if not outcome.ok:
            message = self._controller.consume_error() or outcome.reason
            QMessageBox.warning(self, "Sin Datos", message)
            return

        self._refresh_rows()
        self._refresh_history()
        result = self._controller.result
        self.statusBar().showMessage(
            f"Factor {format_decimal(result.mean_ratio)} from "
            f"{result.valid_row_count} rows, {result.outlier_count} outliers",
        )
        dialog = ResultDialog(self._controller, result, self)
        dialog.exec()
        self._refresh_rows()

    # ── Import ───────────────────────────────────────────────────────

    def _on_import(self):
        if self._worker is not None and self._worker.isRunning():
            self.statusBar().showMessage("An import is already running", 3000)
            return
        path, _ = QFileDialog.getOpenFileName(
            self, "Import Rows", os.path.expanduser("~"),
            "Data Files (*.csv *.txt *.xlsx *.xlsm);;All Files (*)",
        )
        if not path:
            return
        self.statusBar().showMessage(f"Importing {os.path.basename(path)}...")
        self._btn_import.setEnabled(False)
        self._worker = ImportWorkerThread(path, self)
        self._worker.finished_result.connect(self._on_import_finished)
        self._worker.error_occurred.connect(self._on_import_error)
        self._worker.warning_raised.connect(audit_log.log_warning)
        self._worker.finished.connect(lambda: self._btn_import.setEnabled(True))
        self._worker.start()

    def _on_import_finished(self, result):
        outcome = self._controller.import_result(result)
        self._refresh_rows()
        if outcome.count > 0:
            message = MSG_IMPORT_OK.format(count=outcome.count)
            if result.rejected:
                message += f" ({len(result.rejected)} skipped)"
            self.statusBar().showMessage(message, 8000)
            QMessageBox.information(self, "Importar", message)
        else:
            self.statusBar().showMessage(MSG_INVALID_FORMAT, 8000)
            QMessageBox.warning(self, "Importar", MSG_INVALID_FORMAT)

    def _on_import_error(self, message: str):
        audit_log.log_warning(f"Import failed: {message}")
        self.statusBar().showMessage("Import failed", 5000)
        QMessageBox.critical(
            self, "Import Error", MSG_IMPORT_ERROR.format(error=message),
        )

    def _load_example(self):
        result = rows_from_pairs(generate_example_pairs(), source="example dataset")
        self._controller.reset_all()
        self._controller.import_result(result)
        # Drop the blank row left by reset_all
        self._controller.remove_empty_rows()
        self._refresh_rows()
        self.statusBar().showMessage(
            f"Loaded {result.accepted_count} example rows", 5000,
        )

    # ── Misc ─────────────────────────────────────────────────────────

    def _save_audit_log(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Audit Log", "", "Text Files (*.txt);;All Files (*)",
        )
        if not path:
            return
        try:
            export_audit_log(audit_log, path)
        except OSError as exc:
            print(f"[Factor] Audit log export failed: {exc}", file=sys.stderr)
            QMessageBox.critical(self, "Export Error", f"Failed to save: {exc}")

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Computes the metres-per-weight factor of a group of "
            f"measurements, its standard deviation based error margin, "
            f"and flags rows outside ±2σ.</p>"
            f"<p>Rows can be imported from CSV (comma or semicolon "
            f"separated) and .xlsx workbooks.</p>",
        )
