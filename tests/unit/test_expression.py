"""Tests for rule expression parsing."""

import math

import pytest

from fieldverify.expression import (
    Clause,
    LiteralKind,
    parse_clause,
    parse_decimal,
    parse_expression,
    parse_integer,
    parse_number,
)


class TestParseExpression:
    """Test splitting expressions into clauses."""

    def test_single_bare_clause(self):
        assert parse_expression("required") == [Clause("required")]

    def test_clauses_keep_order(self):
        clauses = parse_expression("min=3,max=7,required")
        assert [c.keyword for c in clauses] == ["min", "max", "required"]
        assert [c.raw_value for c in clauses] == ["3", "7", None]

    def test_split_on_first_equals_only(self):
        assert parse_clause("min=1=2") == Clause("min", "1=2")

    def test_empty_value_is_not_bare(self):
        clause = parse_clause("min=")
        assert clause.raw_value == ""
        assert not clause.is_bare

    def test_tokens_are_not_trimmed(self):
        clauses = parse_expression("min=3, max=4")
        assert clauses[1].keyword == " max"
        assert not clauses[1].is_recognized

    def test_empty_expression(self):
        assert parse_expression("") == [Clause("")]

    def test_keywords_are_case_sensitive(self):
        assert not Clause("MinSize", "3").is_recognized
        assert Clause("minSize", "3").is_recognized

    def test_str(self):
        assert str(Clause("required")) == "required"
        assert str(Clause("min", "3")) == "min=3"


class TestLiterals:
    """Test integer and decimal literal parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("42", 42),
        ("-1", -1),
        ("+7", 7),
        ("007", 7),
        ("9223372036854775807", 2 ** 63 - 1),
        ("-9223372036854775808", -(2 ** 63)),
    ])
    def test_integer(self, text, expected):
        assert parse_integer(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1.0", "1_000", " 1", "1 ", "0x1f", "9223372036854775808"])
    def test_not_integer(self, text):
        assert parse_integer(text) is None

    @pytest.mark.parametrize("text,expected", [
        ("2.1", 2.1),
        (".5", 0.5),
        ("5.", 5.0),
        ("-1.25", -1.25),
        ("1e3", 1000.0),
        ("1.5E-2", 0.015),
    ])
    def test_decimal(self, text, expected):
        assert parse_decimal(text) == expected

    @pytest.mark.parametrize("text", ["inf", "-Inf", "+infinity", "INF"])
    def test_decimal_infinity(self, text):
        assert math.isinf(parse_decimal(text))

    def test_decimal_nan(self):
        assert math.isnan(parse_decimal("NaN"))

    @pytest.mark.parametrize("text", ["", ".", "e5", "1.2.3", "1_0.5", "abc", "1e400"])
    def test_not_decimal(self, text):
        assert parse_decimal(text) is None

    @pytest.mark.parametrize("text,expected", [
        ("0x1p3", 8.0),
        ("-0x1.8p1", -3.0),
        ("0X.8P0", 0.5),
    ])
    def test_hex_decimal(self, text, expected):
        assert parse_decimal(text) == expected

    @pytest.mark.parametrize("text", ["0x1", "0x1.8", "0x1p", "0x1p99999"])
    def test_not_hex_decimal(self, text):
        assert parse_decimal(text) is None

    def test_hex_literal_is_decimal(self):
        value = parse_number("0x1p3")
        assert isinstance(value, float)
        assert Clause("max", "0x1p3").literal_kind == LiteralKind.DECIMAL

    def test_number_prefers_integer(self):
        value = parse_number("2")
        assert value == 2
        assert isinstance(value, int)

    def test_number_falls_back_to_decimal(self):
        value = parse_number("2.1")
        assert isinstance(value, float)

    def test_integer_overflow_becomes_decimal(self):
        value = parse_number("99999999999999999999")
        assert isinstance(value, float)
        assert value == 1e20

    def test_literal_kind(self):
        assert Clause("min", "3").literal_kind == LiteralKind.INTEGER
        assert Clause("min", "3.5").literal_kind == LiteralKind.DECIMAL
        assert Clause("min", "x").literal_kind == LiteralKind.INVALID
        assert Clause("required").literal_kind == LiteralKind.NONE
