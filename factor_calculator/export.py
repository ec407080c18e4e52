"""
Export utilities for the Factor Calculator.

- ``export_results_csv``: row table plus summary lines, readable by the
  importer (summary lines fail numeric parsing and are skipped)
- ``export_chart_png``: ratio chart rendered fresh in the light theme on
  its own figure, so the on-screen dark figure is never touched
- ``export_audit_log``: plain-text audit trail
"""

import csv
import os

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from .audit_log import AuditLog
from .chart_ratios import render_ratio_chart
from .constants import (
    EXPORT_DPI, EXPORT_WIDTH_INCHES, PLOT_STYLE_LIGHT,
    format_decimal, format_percent,
)
from .data_model import Result

CSV_HEADER = ["Peso Bruto", "Metros", "Factor", "Atipico"]


def export_results_csv(result: Result, filepath: str, *, delimiter: str = ';') -> str:
    """Write *result* rows and summary to *filepath*; return the path."""
    folder = os.path.dirname(os.path.abspath(filepath))
    os.makedirs(folder, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8', newline='') as fh:
        writer = csv.writer(fh, delimiter=delimiter)
        writer.writerow(CSV_HEADER)
        for row in result.rows:
            writer.writerow([
                repr(row.gross_weight),
                repr(row.length),
                format_decimal(row.ratio),
                "si" if row.is_outlier else "no",
            ])
        writer.writerow([])
        writer.writerow(["Factor promedio", format_decimal(result.mean_ratio)])
        writer.writerow(["Desviacion estandar", format_decimal(result.std_dev)])
        writer.writerow(["Margen de error", format_percent(result.error_margin_percent)])
        writer.writerow(["Registros validos", str(result.valid_row_count)])
    return filepath


def _apply_light_style(fig: Figure) -> None:
    light = PLOT_STYLE_LIGHT
    fig.set_facecolor(light['figure.facecolor'])
    for ax in fig.get_axes():
        ax.set_facecolor(light['axes.facecolor'])
        ax.title.set_color(light['text.color'])
        ax.xaxis.label.set_color(light['axes.labelcolor'])
        ax.yaxis.label.set_color(light['axes.labelcolor'])
        for spine in ax.spines.values():
            spine.set_edgecolor(light['axes.edgecolor'])
        ax.tick_params(axis='x', colors=light['xtick.color'])
        ax.tick_params(axis='y', colors=light['ytick.color'])
        legend = ax.get_legend()
        if legend is not None:
            frame = legend.get_frame()
            frame.set_facecolor(light['legend.facecolor'])
            frame.set_edgecolor(light['legend.edgecolor'])
            for text in legend.get_texts():
                text.set_color(light['text.color'])


def export_chart_png(
    result: Result,
    filepath: str,
    *,
    dpi: int = EXPORT_DPI,
    width_inches: float = EXPORT_WIDTH_INCHES,
) -> str:
    """Render the ratio chart for *result* and save it as PNG.

    Parameters
    ----------
    result : Result
    filepath : str
        Output file path; ``.png`` is appended if missing.
    dpi : int
        Export resolution (default 600).
    width_inches : float
        Figure width in inches (default 6.0).
    """
    if not filepath.lower().endswith('.png'):
        filepath += '.png'
    fig = Figure(figsize=(width_inches, width_inches * 0.6))
    FigureCanvasAgg(fig)
    render_ratio_chart(fig, result, for_export=True)
    _apply_light_style(fig)
    fig.savefig(
        filepath,
        dpi=dpi,
        bbox_inches='tight',
        facecolor=fig.get_facecolor(),
        edgecolor='none',
        pad_inches=0.1,
    )
    return filepath


def export_audit_log(log: AuditLog, filepath: str) -> str:
    with open(filepath, 'w', encoding='utf-8') as fh:
        fh.write(log.export_text())
        fh.write('\n')
    return filepath
