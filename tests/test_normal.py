"""
Tests for the standard normal CDF approximation and PDF.
"""

import math

import pytest

from greeks_calc.analytics.normal import norm_cdf, norm_pdf

from .utils.black_scholes import norm_cdf as exact_cdf

GRID = [x / 10.0 for x in range(-80, 81)]


class TestNormCdf:
    """Accuracy and shape of the CDF approximation."""

    @pytest.mark.parametrize("x", GRID)
    def test_matches_exact_cdf(self, x):
        """Approximation error stays within 2e-7 (largest at x = 0)."""
        assert abs(norm_cdf(x) - exact_cdf(x)) < 2e-7

    @pytest.mark.parametrize("x", [0.0, 0.1, 0.5, 1.0, 1.96, 3.0, 6.5, 1e-9, 37.0])
    def test_symmetry(self, x):
        """cdf(-x) + cdf(x) == 1 within 1e-6."""
        assert abs(norm_cdf(-x) + norm_cdf(x) - 1.0) < 1e-6

    @pytest.mark.parametrize("x", [0.3, 1.0, 2.5, 4.0])
    def test_reflection_is_exact_away_from_zero(self, x):
        """Positive arguments reuse the tail polynomial on |x|."""
        assert norm_cdf(x) == 1.0 - norm_cdf(-x)

    def test_monotone_non_decreasing(self):
        values = [norm_cdf(x) for x in GRID]
        for lower, upper in zip(values, values[1:]):
            assert lower <= upper

    def test_range(self):
        for x in GRID + [-50.0, 50.0]:
            assert 0.0 <= norm_cdf(x) <= 1.0

    def test_known_values(self):
        assert norm_cdf(0.0) == pytest.approx(0.5, abs=1e-6)
        assert norm_cdf(1.0) == pytest.approx(0.841345, abs=1e-6)
        assert norm_cdf(-1.96) == pytest.approx(0.024998, abs=1e-6)

    def test_tails(self):
        assert norm_cdf(-40.0) == pytest.approx(0.0, abs=1e-12)
        assert norm_cdf(40.0) == pytest.approx(1.0, abs=1e-12)


class TestNormPdf:
    """Exact density."""

    def test_peak(self):
        assert norm_pdf(0.0) == pytest.approx(1.0 / math.sqrt(2.0 * math.pi), rel=1e-15)

    @pytest.mark.parametrize("x", [0.25, 1.0, 2.0, 5.0])
    def test_symmetric(self, x):
        assert norm_pdf(x) == norm_pdf(-x)

    @pytest.mark.parametrize("x", GRID)
    def test_closed_form(self, x):
        expected = math.exp(-x * x / 2.0) / math.sqrt(2.0 * math.pi)
        assert norm_pdf(x) == pytest.approx(expected, rel=1e-14, abs=1e-300)

    def test_non_negative(self):
        assert norm_pdf(60.0) >= 0.0
