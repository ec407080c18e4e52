"""
Theme and stylesheet for the Factor Calculator.

The dark Qt stylesheet is assembled from a table of selector rules so
the widgets the calculator names (compute button, factor label, history
placeholder) are styled in one place.  ``apply_plot_style`` pushes a
matplotlib style dict into ``rcParams`` for on-screen charts.
"""

from typing import Dict, List, Tuple

from .constants import DARK_COLORS

# Object names set by the windows and targeted by the rules below
COMPUTE_BUTTON = "computeButton"
FACTOR_LABEL = "factorLabel"
HISTORY_EMPTY_LABEL = "historyEmptyLabel"

Rule = Tuple[str, Dict[str, str]]


def _base_rules(c: Dict[str, str]) -> List[Rule]:
    panel = {'background-color': c['bg_widget'], 'color': c['fg'],
             'border': f"1px solid {c['border']}"}
    return [
        ("QMainWindow, QDialog, QWidget",
         {'background-color': c['bg'], 'color': c['fg'], 'font-size': '13px'}),
        ("QGroupBox",
         {'border': f"1px solid {c['border']}", 'border-radius': '6px',
          'margin-top': '12px', 'padding-top': '16px',
          'font-weight': 'bold', 'color': c['accent']}),
        ("QGroupBox::title",
         {'subcontrol-origin': 'margin', 'left': '12px', 'padding': '0 6px'}),
        ("QPushButton",
         dict(panel, **{'border-radius': '4px', 'padding': '6px 16px',
                        'min-height': '24px'})),
        ("QPushButton:hover",
         {'background-color': c['selection'], 'border-color': c['accent']}),
        ("QPushButton:pressed",
         {'background-color': c['accent'], 'color': c['bg']}),
        ("QDoubleSpinBox",
         {'background-color': c['bg_input'], 'color': c['fg'],
          'border': f"1px solid {c['border']}", 'border-radius': '4px',
          'padding': '4px 8px'}),
        ("QDoubleSpinBox:focus", {'border-color': c['accent']}),
        ("QTableWidget, QListWidget",
         dict(panel, **{'alternate-background-color': c['bg_alt'],
                        'gridline-color': c['border']})),
        ("QTableWidget::item:selected, QListWidget::item:selected",
         {'background-color': c['selection']}),
        ("QHeaderView::section",
         {'background-color': c['bg_alt'], 'color': c['fg'],
          'padding': '4px 8px', 'border': f"1px solid {c['border']}"}),
        ("QStatusBar",
         {'background-color': c['bg_alt'], 'color': c['fg_dim']}),
        ("QMenuBar, QMenu", panel),
        ("QMenuBar::item:selected, QMenu::item:selected",
         {'background-color': c['selection']}),
    ]


def _calculator_rules(c: Dict[str, str]) -> List[Rule]:
    return [
        (f"QPushButton#{COMPUTE_BUTTON}",
         {'font-weight': 'bold', 'color': c['accent'],
          'border-color': c['accent'], 'min-height': '32px'}),
        (f"QLabel#{FACTOR_LABEL}",
         {'font-size': '22px', 'font-weight': 'bold', 'color': c['accent']}),
        (f"QLabel#{HISTORY_EMPTY_LABEL}",
         {'color': c['fg_dim'], 'font-size': '11px'}),
    ]


def render_rules(rules: List[Rule]) -> str:
    """Serialize ``(selector, properties)`` pairs as Qt stylesheet text."""
    blocks = []
    for selector, props in rules:
        body = "\n".join(f"    {k}: {v};" for k, v in props.items())
        blocks.append(f"{selector} {{\n{body}\n}}")
    return "\n".join(blocks) + "\n"


def get_dark_stylesheet(colors: Dict[str, str] = DARK_COLORS) -> str:
    """Generate the dark mode stylesheet."""
    return render_rules(_base_rules(colors) + _calculator_rules(colors))


def apply_plot_style(style_dict: dict) -> None:
    """Apply a style dictionary to matplotlib rcParams.

    Parameters
    ----------
    style_dict : dict
        One of ``PLOT_STYLE_DARK`` or ``PLOT_STYLE_LIGHT``.
    """
    import matplotlib as mpl
    for key, value in style_dict.items():
        mpl.rcParams[key] = value
