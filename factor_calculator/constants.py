"""
Constants for the Factor Calculator.

Centralises named column indices, statistics and history limits,
display formats, user-facing messages, colour palettes and the
matplotlib style dicts.
"""

# ── Named column indices (import files and the row table) ───────────────
COL_GROSS_WEIGHT = 0
COL_LENGTH = 1
MIN_IMPORT_FIELDS = 2

# ── Statistics ───────────────────────────────────────────────────────────
OUTLIER_SIGMA = 2.0

# ── History persistence ──────────────────────────────────────────────────
MAX_HISTORY = 5
HISTORY_KEY = "historial_calculos"
PREFS_FILENAME = "factor_calculator_prefs.json"
HISTORY_DATE_FORMAT = "%d/%m/%Y %H:%M"
# Epoch milliseconds of 9999-12-31 23:59:59.999 UTC
MAX_HISTORY_TIMESTAMP_MS = 253_402_300_799_999
HISTORY_DATE_PLACEHOLDER = "--/--/---- --:--"

# ── Spreadsheet import ───────────────────────────────────────────────────
SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")
LEGACY_SPREADSHEET_EXTENSIONS = (".xls",)
MAX_REPORTED_REJECTIONS = 10

# ── Display formats ──────────────────────────────────────────────────────
RATIO_DECIMALS = 4
PERCENT_DECIMALS = 2

# ── User-facing messages (kept in the original app's language) ──────────
MSG_NO_VALID_ROWS = "Debe haber al menos un registro válido (Peso Bruto > 0)"
MSG_VALUES_CLEARED = "Todos los valores han sido limpiados"
MSG_INVALID_FORMAT = "Formato de archivo inválido: no se encontraron registros"
MSG_IMPORT_OK = "{count} registros importados correctamente"
MSG_IMPORT_ERROR = "Error al importar el archivo: {error}"
MSG_EMPTY_ROWS_REMOVED = "Se eliminaron {count} filas vacías"
MSG_NO_EMPTY_ROWS = "No hay filas vacías para eliminar"

# ── Font family fallback chain ──────────────────────────────────────────
FONT_FAMILIES = [
    "Segoe UI", "DejaVu Sans", "Liberation Sans", "Noto Sans",
    "Ubuntu", "Helvetica", "Arial", "sans-serif",
]

# ── Dark GUI colour palette ──────────────────────────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'fg_bright':    '#ffffff',
    'accent':       '#89b4fa',
    'green':        '#a6e3a1',
    'yellow':       '#f9e2af',
    'red':          '#f38ba8',
    'border':       '#45475a',
    'selection':    '#45475a',
}

# ── Plot palette ─────────────────────────────────────────────────────────
PLOT_PALETTE = {
    'ratio':          '#0033A1',   # in-band rows
    'outlier':        '#C00000',   # rows outside ±2σ
    'mean_line':      '#333333',
    'band_fill':      '#70AD47',   # ±2σ acceptance band
    'band_edge':      '#548235',
}

# ── Export / light-theme text colours ────────────────────────────────────
EXPORT_TEXT_COLOR = '#333333'
EXPORT_BG_COLOR = '#ffffff'

# ── Export settings ──────────────────────────────────────────────────────
EXPORT_DPI = 600
EXPORT_WIDTH_INCHES = 6.0

# ── Matplotlib dark-theme style dict (GUI preview) ──────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'xtick.labelsize':   7,
    'ytick.labelsize':   7,
    'axes.labelsize':    8,
    'axes.titlesize':    9,
    'legend.fontsize':   6.5,
    'grid.color':        DARK_COLORS['border'],
    'legend.facecolor':  DARK_COLORS['bg_widget'],
    'legend.edgecolor':  DARK_COLORS['border'],
}

# ── Matplotlib light-theme style dict (export) ──────────────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'xtick.labelsize':   7,
    'ytick.labelsize':   7,
    'axes.labelsize':    8,
    'axes.titlesize':    9,
    'legend.fontsize':   6.5,
    'grid.color':        '#cccccc',
    'legend.facecolor':  '#ffffff',
    'legend.edgecolor':  '#999999',
}


def format_decimal(value: float) -> str:
    """Format a ratio with four decimals, e.g. ``0.5 -> '0.5000'``."""
    return f"{value:.{RATIO_DECIMALS}f}"


def format_percent(value: float) -> str:
    """Format a percentage with two decimals and a ``%`` sign.

    Examples
    --------
    >>> format_percent(12.3456)
    '12.35%'
    """
    return f"{value:.{PERCENT_DECIMALS}f}%"
