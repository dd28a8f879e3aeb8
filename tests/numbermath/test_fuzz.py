"""Tests for the fuzz propagation algebra."""

import math

import pytest
from pydantic import ValidationError

from fuzzynum.math.fuzz import (
    BOX_TO_GAUSSIAN,
    Fuzz,
    FuzzShape,
    FuzzStyle,
    add_uncertainty,
    combine_product,
    combine_quotient,
    combine_sum,
    combined_sigma,
    confidence_multiplier,
    overlaps,
    propagate,
)


class TestFuzzConstruction:
    """Test creation and validation."""

    def test_create(self):
        f = Fuzz.create(0.1)
        assert f.shape is FuzzShape.GAUSSIAN
        assert f.style is FuzzStyle.ABSOLUTE
        assert f.magnitude == 0.1

    def test_zero_is_normalized_away(self):
        assert Fuzz.create(0.0) is None
        assert Fuzz.box(0) is None

    def test_negative_magnitude_rejected(self, assert_validation_error):
        assert_validation_error(Fuzz, {"magnitude": -1.0}, expected_field="magnitude")

    def test_nan_magnitude_rejected(self):
        with pytest.raises(ValidationError):
            Fuzz(magnitude=math.nan)

    def test_immutable(self):
        f = Fuzz.gaussian(0.1)
        with pytest.raises(ValidationError):
            f.magnitude = 0.2

    def test_equality_is_structural(self):
        assert Fuzz.box(0.5) == Fuzz.box(0.5)
        assert Fuzz.box(0.5) != Fuzz.gaussian(0.5)


class TestFuzzConversions:
    """Test absolute/relative conversion."""

    def test_relative_to_absolute(self):
        f = Fuzz.gaussian(0.01, FuzzStyle.RELATIVE)
        assert f.to_absolute(200.0).magnitude == pytest.approx(2.0)

    def test_absolute_to_relative(self):
        f = Fuzz.gaussian(2.0)
        assert f.to_relative(200.0).magnitude == pytest.approx(0.01)

    def test_relative_undefined_at_zero(self):
        with pytest.raises(ValueError):
            Fuzz.gaussian(1.0).relative_magnitude(0.0)

    def test_box_gaussian_sigma(self):
        """A box of half-width w has standard deviation w / sqrt(3)."""
        assert Fuzz.box(3.0).gaussian_sigma(1.0) == pytest.approx(3.0 / math.sqrt(3))
        assert BOX_TO_GAUSSIAN == pytest.approx(1 / math.sqrt(3))


class TestCombineSum:
    """Test fuzz of sums."""

    def test_gaussian_root_sum_of_squares(self):
        """0.1 and 0.2 combine to sqrt(0.05)."""
        f = combine_sum(Fuzz.gaussian(0.1), 1.0, Fuzz.gaussian(0.2), 2.0)
        assert f.shape is FuzzShape.GAUSSIAN
        assert f.magnitude == pytest.approx(math.sqrt(0.05), abs=1e-9)
        assert f.magnitude == pytest.approx(0.2236, abs=1e-4)

    def test_box_plus_box(self):
        f = combine_sum(Fuzz.box(0.1), 1.0, Fuzz.box(0.3), 1.0)
        assert f.shape is FuzzShape.BOX
        assert f.magnitude == pytest.approx(0.4 / math.sqrt(2))

    def test_box_plus_gaussian(self):
        f = combine_sum(Fuzz.box(0.3), 1.0, Fuzz.gaussian(0.1), 1.0)
        assert f.shape is FuzzShape.GAUSSIAN
        assert f.magnitude == pytest.approx(math.hypot(0.3 / math.sqrt(3), 0.1))

    def test_one_side_exact(self):
        f = combine_sum(Fuzz.box(0.1), 1.0, None, 5.0)
        assert f == Fuzz.box(0.1)

    def test_relative_made_absolute(self):
        f = combine_sum(Fuzz.gaussian(0.1, FuzzStyle.RELATIVE), 10.0, None, 5.0)
        assert f.style is FuzzStyle.ABSOLUTE
        assert f.magnitude == pytest.approx(1.0)

    def test_both_exact(self):
        assert combine_sum(None, 1.0, None, 2.0) is None


class TestCombineProduct:
    """Test fuzz of products and quotients."""

    def test_relative_root_sum_of_squares(self):
        f = combine_product(Fuzz.gaussian(0.03, FuzzStyle.RELATIVE), 2.0,
                            Fuzz.gaussian(0.04, FuzzStyle.RELATIVE), 3.0)
        assert f.style is FuzzStyle.RELATIVE
        assert f.magnitude == pytest.approx(0.05)

    def test_absolute_result_when_an_input_is_absolute(self):
        # relative errors 0.1/2 = 0.05 and 0.12/3 = 0.04
        f = combine_product(Fuzz.gaussian(0.1), 2.0, Fuzz.gaussian(0.12), 3.0)
        assert f.style is FuzzStyle.ABSOLUTE
        assert f.magnitude == pytest.approx(6.0 * math.hypot(0.05, 0.04))

    def test_zero_nominal_uses_first_order_formula(self):
        f = combine_product(Fuzz.gaussian(0.1), 0.0, Fuzz.gaussian(0.2), 3.0)
        assert f.magnitude == pytest.approx(3.0 * 0.1)

    def test_exact_factor_scales(self):
        f = combine_product(Fuzz.box(0.1), 2.0, None, 3.0)
        assert f.shape is FuzzShape.BOX
        assert f.magnitude == pytest.approx(0.3)

    def test_quotient(self):
        f = combine_quotient(Fuzz.gaussian(0.1), 2.0, Fuzz.gaussian(0.12), 3.0)
        assert f.magnitude == pytest.approx((2.0 / 3.0) * math.hypot(0.05, 0.04))

    def test_quotient_by_exact(self):
        f = combine_quotient(Fuzz.gaussian(0.3), 2.0, None, 3.0)
        assert f.magnitude == pytest.approx(0.1)


class TestPropagation:
    """Test the delta method and added uncertainty."""

    def test_propagate(self):
        f = propagate(Fuzz.gaussian(0.1), 4.0, 0.25)
        assert f.magnitude == pytest.approx(0.025)

    def test_propagate_keeps_shape(self):
        assert propagate(Fuzz.box(0.1), 1.0, 2.0).shape is FuzzShape.BOX

    def test_propagate_none(self):
        assert propagate(None, 1.0, 2.0) is None

    def test_add_uncertainty(self):
        assert add_uncertainty(Fuzz.gaussian(0.1), 1.0, 0.05).magnitude == pytest.approx(0.15)
        assert add_uncertainty(None, 1.0, 0.05) == Fuzz.gaussian(0.05)
        assert add_uncertainty(None, 1.0, 0.0) is None


class TestConfidence:
    """Test the confidence multiplier and overlap."""

    def test_half_confidence(self):
        assert confidence_multiplier(0.5) == pytest.approx(0.6745, abs=1e-4)

    def test_monotonic(self):
        assert confidence_multiplier(0.9) < confidence_multiplier(0.99)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5])
    def test_out_of_range(self, p):
        with pytest.raises(ValueError):
            confidence_multiplier(p)

    def test_combined_sigma(self):
        assert combined_sigma(Fuzz.gaussian(0.3), 1.0, Fuzz.gaussian(0.4), 1.0) == pytest.approx(0.5)
        assert combined_sigma(None, 1.0, None, 1.0) == 0.0

    def test_overlaps(self):
        a, b = Fuzz.gaussian(0.1), Fuzz.gaussian(0.1)
        assert overlaps(a, 1.0, b, 1.05, 0.5)
        assert not overlaps(a, 1.0, b, 2.0, 0.5)

    def test_overlap_symmetric(self):
        a, b = Fuzz.gaussian(0.1), Fuzz.box(0.2)
        assert overlaps(a, 1.0, b, 1.1, 0.5) == overlaps(b, 1.1, a, 1.0, 0.5)

    def test_negligible_sigma_counts_as_zero(self):
        tiny = Fuzz.gaussian(1e-30)
        assert not overlaps(tiny, 1.0, tiny, 1.0 + 1e-15, 0.5, fuzz_epsilon=1e-17)
