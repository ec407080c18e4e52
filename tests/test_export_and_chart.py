from pathlib import Path

import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from factor_calculator.audit_log import AuditLog
from factor_calculator.chart_ratios import render_ratio_chart
from factor_calculator.csv_parser import parse_rows_text
from factor_calculator.data_model import Result, Row
from factor_calculator.example_data import (
    generate_example_csv, generate_example_pairs,
)
from factor_calculator.export import (
    export_audit_log, export_chart_png, export_results_csv,
)
from factor_calculator.spreadsheet_reader import load_rows_from_file

from conftest import fill


@pytest.fixture
def result_with_outlier(controller) -> Result:
    fill(controller, [(10.0, 5.0)] * 6 + [(10.0, 50.0), (0.0, 0.0)])
    controller.compute_group_factor()
    return controller.result


def _figure() -> Figure:
    fig = Figure(figsize=(6, 4))
    FigureCanvasAgg(fig)
    return fig


def test_chart_draws_outliers_separately(result_with_outlier):
    fig = _figure()
    render_ratio_chart(fig, result_with_outlier)
    (ax,) = fig.get_axes()
    # in-band scatter + outlier scatter
    assert len(ax.collections) == 2
    assert "Outliers: 1" in ax.texts[0].get_text()


def test_chart_without_outliers_has_single_scatter(controller):
    fill(controller, [(10.0, 5.0), (20.0, 8.0)])
    controller.compute_group_factor()
    fig = _figure()
    render_ratio_chart(fig, controller.result)
    assert len(fig.get_axes()[0].collections) == 1


def test_chart_with_no_valid_rows():
    fig = _figure()
    result = Result(0.0, 0.0, 0.0, 0, rows=(Row(),))
    render_ratio_chart(fig, result, for_export=True)
    assert fig.get_axes()[0].texts[0].get_text() == "No valid rows"


def test_export_results_csv_reimports_valid_rows(result_with_outlier, tmp_path: Path):
    path = export_results_csv(result_with_outlier, str(tmp_path / "out" / "result.csv"))
    text = Path(path).read_text(encoding="utf-8")
    assert "Factor promedio" in text
    reimported = parse_rows_text(text)
    assert [(r.gross_weight, r.length) for r in reimported.rows] == (
        [(10.0, 5.0)] * 6 + [(10.0, 50.0)]
    )


def test_export_chart_png(result_with_outlier, tmp_path: Path):
    path = export_chart_png(result_with_outlier, str(tmp_path / "chart"), dpi=50)
    assert path.endswith(".png")
    data = Path(path).read_bytes()
    assert data[:8] == b"\x89PNG\r\n\x1a\n"


def test_export_audit_log(controller, audit, tmp_path: Path):
    fill(controller, [(10.0, 5.0)])
    controller.compute_group_factor()
    path = export_audit_log(audit, str(tmp_path / "audit.txt"))
    text = Path(path).read_text(encoding="utf-8")
    assert "[SESSION_START]" in text
    assert "[COMPUTATION] Group factor" in text


def test_audit_log_entries():
    log = AuditLog()
    log.log_warning("careful")
    log.log_data_load("rows.csv", "rows=3")
    assert [e['action'] for e in log.entries] == ["SESSION_START", "WARNING", "DATA_LOAD"]
    assert log.entries_of("DATA_LOAD")[0]['description'] == "Data loaded from rows.csv"


def test_example_pairs_contain_one_outlier(controller):
    pairs = generate_example_pairs(n_rows=12, seed=7)
    assert len(pairs) == 12
    fill(controller, pairs)
    controller.compute_group_factor()
    assert controller.result.outlier_count == 1
    assert controller.rows[-1].is_outlier


def test_example_pairs_reject_too_few_rows():
    with pytest.raises(ValueError):
        generate_example_pairs(n_rows=3)


def test_example_csv_imports(tmp_path: Path):
    path = generate_example_csv(str(tmp_path), n_rows=8)
    with pytest.warns(UserWarning):
        result = load_rows_from_file(path)
    assert result.accepted_count == 8
