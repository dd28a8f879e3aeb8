"""Tests for the Rational type and its helpers."""

import fractions

import pytest

from fuzzynum.core.errors import DivisionByZeroError
from fuzzynum.math.exact import BigIntVal, IntVal, RationalVal
from fuzzynum.math.rational import Rational, continued_fraction, gcd, lcm, reduce_fraction
from fuzzynum.math.value import Ordering


class TestRationalHelpers:
    """Test helper functions for rationals."""

    def test_gcd_simple(self):
        """Test GCD of simple numbers."""
        assert gcd(12, 8) == 4
        assert gcd(15, 10) == 5

    def test_gcd_coprime(self):
        """Test GCD of coprime numbers."""
        assert gcd(7, 11) == 1

    def test_gcd_with_zero(self):
        """Test GCD with zero."""
        assert gcd(5, 0) == 5
        assert gcd(0, 5) == 5

    def test_gcd_negative(self):
        """Test GCD with negative numbers."""
        assert gcd(-12, 8) == 4
        assert gcd(12, -8) == 4

    def test_lcm_simple(self):
        """Test LCM of simple numbers."""
        assert lcm(4, 6) == 12
        assert lcm(3, 5) == 15

    def test_reduce_fraction_basic(self):
        """Test fraction reduction."""
        assert reduce_fraction(2, 4) == (1, 2)
        assert reduce_fraction(6, 9) == (2, 3)

    def test_reduce_fraction_negative_denominator(self):
        """Test that denominator is made positive."""
        num, den = reduce_fraction(3, -5)
        assert den > 0
        assert num == -3

    def test_reduce_fraction_zero_denominator(self):
        """A zero denominator is a division by zero."""
        with pytest.raises(DivisionByZeroError):
            reduce_fraction(1, 0)

    def test_continued_fraction(self):
        """Test recovering simple fractions from floats."""
        assert continued_fraction(0.5) == (1, 2)
        assert continued_fraction(0.75) == (3, 4)
        assert continued_fraction(3.0) == (3, 1)


class TestRationalConstruction:
    """Test construction and normalization."""

    def test_reduced_on_construction(self):
        r = Rational(6, 8)
        assert r.numerator == 3
        assert r.denominator == 4

    def test_sign_lives_in_numerator(self):
        """Rational(n, d) equals Rational(-n, -d) and the denominator is positive."""
        assert Rational(3, 4) == Rational(-3, -4)
        r = Rational(3, -4)
        assert r.numerator == -3
        assert r.denominator == 4

    def test_whole_number(self):
        r = Rational(5)
        assert r.is_whole()
        assert r == 5

    def test_zero_denominator_raises(self):
        with pytest.raises(DivisionByZeroError):
            Rational(1, 0)

    def test_zero_denominator_is_zero_division_error(self):
        """DivisionByZeroError is also a ZeroDivisionError."""
        with pytest.raises(ZeroDivisionError):
            Rational(1, 0)

    def test_from_fraction(self):
        assert Rational.from_fraction(fractions.Fraction(10, 4)) == Rational(5, 2)

    def test_approximate(self):
        assert Rational.approximate(0.125) == Rational(1, 8)

    def test_immutable(self):
        """Rationals are frozen."""
        r = Rational(1, 2)
        with pytest.raises(Exception):
            r.numerator = 3

    def test_hash_matches_equality(self):
        assert hash(Rational(2, 4)) == hash(Rational(1, 2))
        assert len({Rational(2, 4), Rational(1, 2), Rational(3, 6)}) == 1


class TestRationalArithmetic:
    """Test arithmetic operations."""

    def test_add(self):
        assert Rational(1, 2) + Rational(1, 3) == Rational(5, 6)

    def test_add_int(self):
        assert Rational(1, 2) + 1 == Rational(3, 2)
        assert 1 + Rational(1, 2) == Rational(3, 2)

    def test_subtract(self):
        assert Rational(1, 2) - Rational(1, 3) == Rational(1, 6)
        assert 1 - Rational(1, 4) == Rational(3, 4)

    def test_multiply(self):
        assert Rational(2, 3) * Rational(3, 4) == Rational(1, 2)

    def test_divide(self):
        assert Rational(1, 2) / Rational(1, 4) == Rational(2)

    def test_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            Rational(1, 2) / Rational(0)

    def test_power(self):
        assert Rational(2, 3) ** 2 == Rational(4, 9)
        assert Rational(2, 3) ** -2 == Rational(9, 4)
        assert Rational(2, 3) ** 0 == Rational(1)

    def test_zero_to_negative_power(self):
        with pytest.raises(DivisionByZeroError):
            Rational(0) ** -1

    def test_negate_and_absolute(self):
        assert -Rational(1, 2) == Rational(-1, 2)
        assert abs(Rational(-1, 2)) == Rational(1, 2)

    def test_signum(self):
        assert Rational(-3, 7).signum() == -1
        assert Rational(0).signum() == 0
        assert Rational(3, 7).signum() == 1


class TestRationalRoots:
    """Test exact roots via integer k-th roots."""

    def test_square_root_exact(self):
        assert Rational(9, 4).root(2) == Rational(3, 2)

    def test_square_root_inexact(self):
        assert Rational(2).root(2) is None
        assert Rational(4, 3).root(2) is None

    def test_cube_root_of_negative(self):
        assert Rational(-8, 27).root(3) == Rational(-2, 3)

    def test_even_root_of_negative(self):
        assert Rational(-4).root(2) is None

    def test_large_root(self):
        big = 12345678901234567890 ** 2
        assert Rational(big).root(2) == Rational(12345678901234567890)


class TestRationalComparison:
    """Test ordering by cross-multiplication."""

    def test_compare(self):
        assert Rational(1, 3).compare(Rational(1, 2)) is Ordering.LT
        assert Rational(1, 2).compare(Rational(2, 4)) is Ordering.EQ
        assert Rational(2, 3).compare(Rational(1, 2)) is Ordering.GT

    def test_operators(self):
        assert Rational(1, 3) < Rational(1, 2)
        assert Rational(1, 2) <= Rational(1, 2)
        assert Rational(3, 4) > Rational(1, 2)
        assert Rational(-1, 2) < 0

    def test_compare_large_values_exactly(self):
        """Values too close for floats still order correctly."""
        a = Rational(10 ** 30 + 1, 10 ** 30)
        b = Rational(10 ** 30 + 2, 10 ** 30)
        assert a < b


class TestRationalConversion:
    """Test conversions."""

    def test_to_float(self):
        assert Rational(1, 4).to_float() == 0.25

    def test_to_exact_value_whole(self):
        assert Rational(4, 2).to_exact_value() == IntVal(value=2)

    def test_to_exact_value_big(self):
        assert Rational(2 ** 70).to_exact_value() == BigIntVal(value=2 ** 70)

    def test_to_exact_value_fraction(self):
        assert Rational(1, 3).to_exact_value() == RationalVal(value=Rational(1, 3))

    def test_to_string(self):
        assert Rational(3, 4).to_string() == "3/4"
        assert str(Rational(5)) == "5"
