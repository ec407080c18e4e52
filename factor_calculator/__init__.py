"""
Factor Calculator v1.0.0

Desktop tool for computing the metres-per-weight factor of a group of
measurements.  Each row pairs a gross weight ("Peso Bruto") with a length
("Metros"); the tool averages the per-row ratios, reports a standard
deviation based error margin, flags rows outside ±2σ, and keeps a short
history of past group factors.

Rows can be typed in, or imported from CSV text and ``.xlsx`` workbooks.
"""

APP_NAME = "Factor Calculator"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-18"
__version__ = APP_VERSION
