import math

import pytest

from factor_calculator.csv_parser import (
    REASON_NON_NUMERIC, REASON_NON_POSITIVE_WEIGHT, REASON_TOO_FEW_FIELDS,
    parse_decimal, parse_record, parse_records, parse_rows_text, rows_from_pairs,
    warn_rejections,
)


def test_mixed_input_accepts_only_positive_numeric_weights():
    result = parse_rows_text("10,5\n20,8\n0,3\n-1,-1\nabc,5")

    assert result.accepted_count == 2
    first, second = result.rows
    assert (first.gross_weight, first.length) == (10.0, 5.0)
    assert math.isclose(first.ratio, 0.5)
    assert (second.gross_weight, second.length) == (20.0, 8.0)
    assert math.isclose(second.ratio, 0.4)
    assert [o.reason for o in result.rejected] == [
        REASON_NON_POSITIVE_WEIGHT,
        REASON_NON_POSITIVE_WEIGHT,
        REASON_NON_NUMERIC,
    ]
    assert [o.line_number for o in result.rejected] == [3, 4, 5]


def test_semicolon_and_comma_separators():
    result = parse_rows_text("10;5\n20,8\n30 ; 12 ; extra")
    assert [(r.gross_weight, r.length) for r in result.rows] == [
        (10.0, 5.0), (20.0, 8.0), (30.0, 12.0),
    ]


def test_header_line_is_skipped_as_non_numeric():
    result = parse_rows_text("Peso Bruto;Metros\n100.5;251.25\n")
    assert result.accepted_count == 1
    assert result.rejected[0].line_number == 1
    assert result.rejected[0].reason == REASON_NON_NUMERIC


def test_blank_lines_and_whitespace_are_ignored():
    result = parse_rows_text("\n   \n  10 , 5  \r\n\n")
    assert result.accepted_count == 1
    assert result.rejected == []


def test_single_field_is_rejected():
    outcome = parse_record("42", line_number=7)
    assert not outcome.accepted
    assert outcome.reason == REASON_TOO_FEW_FIELDS
    assert outcome.line_number == 7


def test_blank_record_returns_none():
    assert parse_record("   ") is None


def test_negative_length_is_accepted():
    outcome = parse_record("10,-5")
    assert outcome.accepted
    assert math.isclose(outcome.row.ratio, -0.5)


@pytest.mark.parametrize("line", ["inf,5", "10,nan", "1_000,5", "10,", ",5"])
def test_non_finite_or_malformed_numbers_are_rejected(line):
    outcome = parse_record(line)
    assert not outcome.accepted
    assert outcome.reason == REASON_NON_NUMERIC


def test_scientific_notation_is_accepted():
    outcome = parse_record("1e2,2.5E1")
    assert (outcome.row.gross_weight, outcome.row.length) == (100.0, 25.0)


def test_parse_records_reports_every_non_blank_line():
    outcomes = parse_records("10,5\n\nx,y\n")
    assert [o.accepted for o in outcomes] == [True, False]
    assert [o.line_number for o in outcomes] == [1, 3]


def test_rows_from_pairs_uses_same_contract():
    result = rows_from_pairs([(10, 5), (0, 3), (2.5, 10.0)], source="sheet")
    assert [(r.gross_weight, r.length) for r in result.rows] == [
        (10.0, 5.0), (2.5, 10.0),
    ]
    assert result.rejected[0].reason == REASON_NON_POSITIVE_WEIGHT
    assert result.source == "sheet"


def test_warn_rejections_aggregates_into_one_warning():
    result = parse_rows_text("\n".join(["bad,row"] * 12))
    with pytest.warns(UserWarning, match=r"Skipped 12 record\(s\).*and 2 more"):
        warn_rejections(result, "data.csv")


def test_warn_rejections_is_silent_without_rejections(recwarn):
    warn_rejections(parse_rows_text("10,5"), "data.csv")
    assert len(recwarn) == 0


@pytest.mark.parametrize("text, expected", [
    ("10", 10.0),
    ("  2.5 ", 2.5),
    ("-3", -3.0),
    ("1e2", 100.0),
])
def test_parse_decimal_accepts_plain_numbers(text, expected):
    assert parse_decimal(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "inf", "-Infinity", "nan", "1_000", "abc"])
def test_parse_decimal_rejects_non_measurements(text):
    with pytest.raises(ValueError):
        parse_decimal(text)
