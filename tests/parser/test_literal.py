"""Tests for the numeric literal parser."""

import pytest

from fuzzynum.core.errors import MalformedLiteralError
from fuzzynum.math import ExactNumber, Factor, Fuzz, FuzzShape, FuzzyNumber, Number, Rational, RationalVal
from fuzzynum.parser import ParsedLiteral, parse_literal, parse_number


class TestExactLiterals:
    """Literals without fuzz."""

    @pytest.mark.parametrize("text,expected", [
        ("42", ExactNumber(42)),
        ("-7", ExactNumber(-7)),
        ("+3", ExactNumber(3)),
        ("1.25", ExactNumber(Rational(5, 4))),
        ("0.1", ExactNumber(Rational(1, 10))),
        ("3.141592700", ExactNumber(Rational(31415927, 10000000))),
        ("1/3", ExactNumber(Rational(1, 3))),
        ("-6 / 8", ExactNumber(Rational(-3, 4))),
        ("1.25e3", ExactNumber(1250)),
        ("5E-2", ExactNumber(Rational(1, 20))),
        ("  12  ", ExactNumber(12)),
    ])
    def test_parse(self, text, expected):
        result = parse_number(text)
        assert isinstance(result, ExactNumber)
        assert result == expected

    def test_parsed_literal_parts(self):
        parsed = parse_literal("1.25")
        assert parsed == ParsedLiteral(RationalVal(value=Rational(5, 4)), None, Factor.SCALAR)

    def test_number_of_string(self):
        assert Number.of("1/2") == ExactNumber(Rational(1, 2))


class TestFuzzyLiterals:
    """Literals carrying fuzz."""

    def test_implicit_fuzz(self):
        result = parse_number("3.1415927")
        assert isinstance(result, FuzzyNumber)
        assert result.value == RationalVal(value=Rational(31415927, 10000000))
        assert result.fuzz == Fuzz.box(5e-7)

    def test_implicit_fuzz_three_places(self):
        assert parse_literal("0.123").fuzz.magnitude == pytest.approx(5e-3)

    def test_gaussian_marker(self):
        parsed = parse_literal("2.718(3)")
        assert parsed.fuzz.shape is FuzzShape.GAUSSIAN
        assert parsed.fuzz.magnitude == pytest.approx(0.003)

    def test_two_digit_gaussian_marker(self):
        parsed = parse_literal("3.14159(12)")
        assert parsed.fuzz.magnitude == pytest.approx(0.00012)

    def test_box_marker(self):
        parsed = parse_literal("1.5[2]")
        assert parsed.fuzz.shape is FuzzShape.BOX
        assert parsed.fuzz.magnitude == pytest.approx(0.2)

    @pytest.mark.parametrize("text", ["1.5...", "1.5*"])
    def test_implicit_markers(self, text):
        parsed = parse_literal(text)
        assert parsed.fuzz.shape is FuzzShape.BOX
        assert parsed.fuzz.magnitude == pytest.approx(0.5)

    def test_marker_forces_fuzz_on_short_decimal(self):
        assert isinstance(parse_number("1.25..."), FuzzyNumber)

    def test_marker_with_exponent(self):
        parsed = parse_literal("6.02(5)e23")
        assert parsed.value.to_float() == pytest.approx(6.02e23)
        assert parsed.fuzz.magnitude == pytest.approx(5e21)

    def test_rendering_round_trip(self):
        assert str(parse_number("3.14159(12)")) == "3.14159(12)"


class TestFactorTokens:
    """Trailing factor tokens."""

    @pytest.mark.parametrize("text", ["pi", "2pi", "2 Pi", "2PI", "2π", "2𝛑"])
    def test_pi_tokens(self, text):
        assert parse_literal(text).factor is Factor.PI

    def test_bare_pi(self):
        assert parse_number("π") == Number.pi

    def test_e_tokens(self):
        assert parse_number("𝑒") == Number.e
        assert parse_number("3ℯ") == ExactNumber(3, Factor.E)

    def test_rational_times_pi(self):
        assert parse_number("3/4 π") == ExactNumber(Rational(3, 4), Factor.PI)


class TestMalformedLiterals:
    """Inputs that are not numeric literals."""

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "1/", "--1", "1e", "1 2", "pi pi", "1(123)"])
    def test_malformed(self, text):
        with pytest.raises(MalformedLiteralError):
            parse_literal(text)

    def test_not_a_string(self):
        with pytest.raises(MalformedLiteralError):
            parse_literal(3)

    def test_zero_denominator(self):
        with pytest.raises(MalformedLiteralError, match="zero denominator"):
            parse_literal("1/0")

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_number("twelve")
