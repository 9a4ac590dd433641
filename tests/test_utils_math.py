"""
Tests for src/utils/math.py

These tests verify the percentage helpers with small hand-crafted values
where the expected result is easy to reason about.
"""

import math

import numpy as np
import pytest

from src.utils.math import percent_change, truncate_percent


def test_percent_change_rise():
    """100 -> 110 is a 10% rise."""
    assert float(percent_change(100.0, 110.0)) == pytest.approx(10.0)


def test_percent_change_fall():
    """110 -> 99 is a 10% fall."""
    assert float(percent_change(110.0, 99.0)) == pytest.approx(-10.0)


def test_percent_change_is_float32():
    """Arithmetic stays at the storage precision of the prices."""
    result = percent_change(102.0, 110.0)
    assert result.dtype == np.float32
    assert float(result) == pytest.approx(800.0 / 102.0, rel=1e-6)


def test_percent_change_reversed_arguments():
    """Swapping arguments changes the reference price, not just the sign."""
    assert float(percent_change(90.0, 130.0)) == pytest.approx(44.444444, rel=1e-6)
    assert float(percent_change(130.0, 90.0)) == pytest.approx(-30.769231, rel=1e-6)


def test_percent_change_zero_reference_returns_sentinel():
    """A zero reference price yields inf/nan instead of raising."""
    assert math.isinf(float(percent_change(0.0, 10.0)))
    assert float(percent_change(0.0, 10.0)) > 0
    assert float(percent_change(0.0, -10.0)) < 0
    assert math.isnan(float(percent_change(0.0, 0.0)))


def test_percent_change_zero_reference_emits_no_warning():
    with np.errstate(all="raise"):
        # errstate inside percent_change overrides the caller's setting
        assert math.isinf(float(percent_change(0.0, 5.0)))


def test_truncate_percent_toward_zero():
    assert truncate_percent(7.84) == 7.0
    assert truncate_percent(4.999) == 4.0
    assert truncate_percent(-4.9) == -4.0
    assert truncate_percent(-0.5) == 0.0
    assert truncate_percent(5.0) == 5.0


def test_truncate_percent_accepts_numpy_scalars():
    assert truncate_percent(np.float32(18.18)) == 18.0


def test_truncate_percent_passes_non_finite_through():
    assert math.isnan(truncate_percent(float("nan")))
    assert truncate_percent(float("inf")) == float("inf")
    assert truncate_percent(float("-inf")) == float("-inf")
