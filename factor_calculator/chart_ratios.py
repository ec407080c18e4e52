"""
Per-row ratio chart for the Factor Calculator.

Plots the ratio of every valid row against its row number, with the
group mean and the ±2σ acceptance band.  Rows outside the band (the
outliers of the last computation) are drawn in red.
"""

import numpy as np
from matplotlib.figure import Figure

from .constants import (
    PLOT_PALETTE, DARK_COLORS, OUTLIER_SIGMA,
    EXPORT_TEXT_COLOR, EXPORT_BG_COLOR,
    format_decimal, format_percent,
)
from .data_model import Result
from .statistics_engine import outlier_bounds


def render_ratio_chart(
    fig: Figure,
    result: Result,
    *,
    for_export: bool = False,
) -> None:
    """Render the ratio scatter for *result* on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    result : Result
        Group computation whose rows are plotted.
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    pal = PLOT_PALETTE
    ax = fig.add_subplot(111)

    # Row numbers follow the table (1-based), invalid rows are skipped
    points = [
        (i + 1, row.ratio, row.is_outlier)
        for i, row in enumerate(result.rows)
        if row.is_valid()
    ]
    if not points:
        ax.text(0.5, 0.5, 'No valid rows',
                transform=ax.transAxes, ha='center', va='center')
        return

    x = np.array([p[0] for p in points])
    y = np.array([p[1] for p in points])
    flags = np.array([p[2] for p in points], dtype=bool)

    # ── ±2σ band and mean ────────────────────────────────────────────
    lower, upper = outlier_bounds(result.mean_ratio, result.std_dev)
    ax.axhspan(
        lower, upper, color=pal['band_fill'], alpha=0.15, zorder=1,
        label=f'±{OUTLIER_SIGMA:g}σ band',
    )
    ax.axhline(lower, color=pal['band_edge'], linewidth=0.8, linestyle='--', zorder=2)
    ax.axhline(upper, color=pal['band_edge'], linewidth=0.8, linestyle='--', zorder=2)
    ax.axhline(
        result.mean_ratio, color=pal['mean_line'], linewidth=1.5, zorder=3,
        label=f'Mean = {format_decimal(result.mean_ratio)}',
    )

    # ── Rows ─────────────────────────────────────────────────────────
    ax.scatter(
        x[~flags], y[~flags], color=pal['ratio'], s=22, zorder=4,
        label='Row factor',
    )
    if flags.any():
        ax.scatter(
            x[flags], y[flags], color=pal['outlier'], marker='X', s=40,
            zorder=5, label='Outlier',
        )

    # ── Statistics annotation ────────────────────────────────────────
    stats_text = (
        f"Valid rows: {result.valid_row_count}\n"
        f"Outliers: {int(flags.sum())}\n"
        f"Std dev: {format_decimal(result.std_dev)}\n"
        f"Error margin: {format_percent(result.error_margin_percent)}"
    )
    text_color = EXPORT_TEXT_COLOR if for_export else DARK_COLORS['fg']
    box_color = EXPORT_BG_COLOR if for_export else DARK_COLORS['bg_widget']
    ax.text(
        0.98, 0.95, stats_text,
        transform=ax.transAxes, ha='right', va='top',
        fontsize=6.5, family='monospace',
        color=text_color,
        bbox=dict(
            boxstyle='round,pad=0.4',
            facecolor=box_color,
            edgecolor='#999999',
            alpha=0.9,
        ),
    )

    # ── Labels ───────────────────────────────────────────────────────
    ax.set_xlabel("Row", fontsize=8)
    ax.set_ylabel("Factor (m / kg)", fontsize=8)
    ax.set_title("Factor per Row", fontsize=10, fontweight='bold')
    ax.set_xticks(x)

    ax.legend(fontsize=6, framealpha=0.9, loc='upper left')
    ax.grid(axis='y', linewidth=0.4, alpha=0.5)

    fig.tight_layout(pad=1.5)
