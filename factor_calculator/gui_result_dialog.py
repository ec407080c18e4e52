"""
Result dialog for the Factor Calculator.

Shows the group factor, error margin, valid row count and standard
deviation, the row table with outliers highlighted, the ratio chart,
and a weight-to-metres converter.  "Clear Values" zeroes every row in
the controller and closes the dialog.
"""

import os

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QGroupBox, QLabel,
    QPushButton, QTableWidget, QTableWidgetItem, QHeaderView,
    QDoubleSpinBox, QFileDialog, QMessageBox, QSplitter,
)
from PySide6.QtGui import QColor
from PySide6.QtCore import Qt

from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas

from .chart_ratios import render_ratio_chart
from .constants import (
    DARK_COLORS, MSG_VALUES_CLEARED, format_decimal, format_percent,
)
from .controller import FactorController
from .data_model import Result
from .export import export_chart_png, export_results_csv
from .theme import FACTOR_LABEL


class ResultDialog(QDialog):
    """Read-only view of one ``Result``."""

    def __init__(self, controller: FactorController, result: Result, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._result = result

        self.setWindowTitle("Resultado del Cálculo")
        self.setMinimumSize(900, 600)
        self._setup_ui()
        self._populate()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        # ── Summary ──────────────────────────────────────────────────
        grp_summary = QGroupBox("Factor del Grupo")
        form = QFormLayout(grp_summary)
        self._lbl_factor = QLabel()
        self._lbl_factor.setObjectName(FACTOR_LABEL)
        self._lbl_margin = QLabel()
        self._lbl_count = QLabel()
        self._lbl_std = QLabel()
        form.addRow("Factor promedio:", self._lbl_factor)
        form.addRow("Margen de error:", self._lbl_margin)
        form.addRow("Registros válidos:", self._lbl_count)
        form.addRow("Desviación estándar:", self._lbl_std)
        layout.addWidget(grp_summary)

        # ── Converter ────────────────────────────────────────────────
        grp_convert = QGroupBox("Convertir Peso a Metros")
        conv_row = QHBoxLayout(grp_convert)
        self._spn_weight = QDoubleSpinBox()
        self._spn_weight.setRange(0.0, 1e9)
        self._spn_weight.setDecimals(3)
        self._lbl_converted = QLabel("0.0000 m")
        conv_row.addWidget(QLabel("Peso:"))
        conv_row.addWidget(self._spn_weight)
        conv_row.addWidget(self._lbl_converted, 1)
        layout.addWidget(grp_convert)

        # ── Rows + chart ─────────────────────────────────────────────
        splitter = QSplitter(Qt.Orientation.Horizontal)
        self._table = QTableWidget(0, 3)
        self._table.setHorizontalHeaderLabels(["Peso Bruto", "Metros", "Factor"])
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setAlternatingRowColors(True)
        splitter.addWidget(self._table)

        self._fig = Figure(figsize=(6, 4))
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        splitter.addWidget(self._canvas)
        splitter.setSizes([350, 550])
        layout.addWidget(splitter, 1)

        # ── Buttons ──────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        self._btn_export_csv = QPushButton("Export CSV...")
        self._btn_export_png = QPushButton("Export PNG...")
        self._btn_clear = QPushButton("Limpiar Valores")
        self._btn_close = QPushButton("Close")
        btn_row.addWidget(self._btn_export_csv)
        btn_row.addWidget(self._btn_export_png)
        btn_row.addStretch()
        btn_row.addWidget(self._btn_clear)
        btn_row.addWidget(self._btn_close)
        layout.addLayout(btn_row)

        self._spn_weight.valueChanged.connect(self._on_weight_changed)
        self._btn_export_csv.clicked.connect(lambda *_: self._export_csv())
        self._btn_export_png.clicked.connect(lambda *_: self._export_png())
        self._btn_clear.clicked.connect(lambda *_: self._on_clear_values())
        self._btn_close.clicked.connect(self.accept)

    def _populate(self):
        r = self._result
        self._lbl_factor.setText(format_decimal(r.mean_ratio))
        self._lbl_margin.setText(format_percent(r.error_margin_percent))
        self._lbl_count.setText(str(r.valid_row_count))
        self._lbl_std.setText(format_decimal(r.std_dev))

        self._table.setRowCount(len(r.rows))
        outlier_bg = QColor(DARK_COLORS['red'])
        outlier_fg = QColor(DARK_COLORS['bg'])
        for i, row in enumerate(r.rows):
            cells = [
                QTableWidgetItem(f"{row.gross_weight:g}"),
                QTableWidgetItem(f"{row.length:g}"),
                QTableWidgetItem(format_decimal(row.ratio)),
            ]
            for j, item in enumerate(cells):
                if row.is_outlier:
                    item.setBackground(outlier_bg)
                    item.setForeground(outlier_fg)
                    item.setToolTip("Valor atípico (fuera de ±2σ)")
                self._table.setItem(i, j, item)

        render_ratio_chart(self._fig, r)
        self._canvas.draw_idle()

    # ── Slots ────────────────────────────────────────────────────────

    def _on_weight_changed(self, value: float):
        meters = self._controller.convert_weight_to_length(value)
        self._lbl_converted.setText(f"{format_decimal(meters)} m")

    def _on_clear_values(self):
        self._controller.clear_outliers()
        QMessageBox.information(self, "Valores", MSG_VALUES_CLEARED)
        self.accept()

    def _export_csv(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Results as CSV", "", "CSV Files (*.csv);;All Files (*)",
        )
        if not path:
            return
        try:
            export_results_csv(self._result, path)
        except OSError as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to export: {exc}")
            return
        QMessageBox.information(
            self, "Export Complete", f"Exported to {os.path.basename(path)}",
        )

    def _export_png(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Chart as PNG", "", "PNG Files (*.png);;All Files (*)",
        )
        if not path:
            return
        try:
            path = export_chart_png(self._result, path)
        except (OSError, ValueError) as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to export: {exc}")
            return
        QMessageBox.information(
            self, "Export Complete", f"Exported to {os.path.basename(path)}",
        )
