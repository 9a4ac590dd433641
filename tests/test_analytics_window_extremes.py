"""
Tests for trailing-window extremes.

The deque implementation is checked against a brute-force definition
(pandas rolling max/min with the window clamped at the start of the series)
on random data, plus a few hand-worked cases.
"""

import numpy as np
import pandas as pd
import pytest

from src.analytics.window_extremes import (
    compute_running_max,
    compute_running_min,
    compute_window_extremes,
)
from src.data.schemas import PriceSeries


SCENARIO_CLOSES = [100, 101, 102, 103, 110, 95, 90, 85, 130, 140]


def brute_force_extremes(closes: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
    """O(N*K) reference: max/min over closes[max(0, i-k+1) : i+1]."""
    n = len(closes)
    running_max = np.empty(n, dtype=np.float32)
    running_min = np.empty(n, dtype=np.float32)
    for i in range(n):
        window = closes[max(0, i - k + 1): i + 1]
        running_max[i] = window.max()
        running_min[i] = window.min()
    return running_max, running_min


def make_random_series(n: int, seed: int) -> PriceSeries:
    rng = np.random.default_rng(seed)
    closes = 100 * np.exp(np.cumsum(rng.normal(0.0, 0.02, n)))
    return PriceSeries.from_closes("RANDOM", closes)


def test_scenario_window_of_three():
    series = PriceSeries.from_closes("TEST", SCENARIO_CLOSES)
    extremes = compute_window_extremes(series, lookback_period=3)

    assert extremes.running_max.tolist() == [100, 101, 102, 103, 110, 110, 110, 95, 130, 140]
    assert extremes.running_min.tolist() == [100, 100, 100, 101, 102, 95, 90, 85, 85, 85]


def test_window_of_one_is_the_series_itself():
    series = PriceSeries.from_closes("TEST", SCENARIO_CLOSES)
    extremes = compute_window_extremes(series, lookback_period=1)

    np.testing.assert_array_equal(extremes.running_max, series.close_prices)
    np.testing.assert_array_equal(extremes.running_min, series.close_prices)


def test_window_larger_than_series_clamps_to_start():
    """K=200 on 10 bars gives the running all-time max/min, not an error."""
    series = PriceSeries.from_closes("TEST", SCENARIO_CLOSES)
    extremes = compute_window_extremes(series, lookback_period=200)

    expected_max = np.maximum.accumulate(series.close_prices)
    expected_min = np.minimum.accumulate(series.close_prices)
    np.testing.assert_array_equal(extremes.running_max, expected_max)
    np.testing.assert_array_equal(extremes.running_min, expected_min)


def test_empty_series_gives_empty_arrays():
    extremes = compute_window_extremes(PriceSeries.from_closes("EMPTY", []), lookback_period=5)

    assert len(extremes) == 0
    assert len(extremes.running_max) == 0
    assert len(extremes.running_min) == 0


@pytest.mark.parametrize("k", [0, -3])
def test_lookback_below_one_is_rejected(k):
    series = PriceSeries.from_closes("TEST", SCENARIO_CLOSES)
    with pytest.raises(ValueError, match="lookback_period"):
        compute_window_extremes(series, lookback_period=k)


def test_ties_keep_the_shared_value():
    closes = np.array([5.0, 5.0, 5.0, 4.0, 5.0], dtype=np.float32)
    assert compute_running_max(closes, 2).tolist() == [5.0, 5.0, 5.0, 5.0, 5.0]
    assert compute_running_min(closes, 2).tolist() == [5.0, 5.0, 5.0, 4.0, 4.0]


def test_result_arrays_are_read_only():
    series = PriceSeries.from_closes("TEST", SCENARIO_CLOSES)
    extremes = compute_window_extremes(series, lookback_period=3)

    with pytest.raises(ValueError):
        extremes.running_max[0] = 0.0


@pytest.mark.parametrize("n,seed", [(1, 1), (17, 2), (500, 3), (3000, 4)])
def test_matches_brute_force_on_random_series(n, seed):
    series = make_random_series(n, seed)
    closes = series.close_prices

    for k in sorted({1, 2, 7, n, n + 10}):
        extremes = compute_window_extremes(series, lookback_period=k)
        expected_max, expected_min = brute_force_extremes(closes, k)

        np.testing.assert_array_equal(extremes.running_max, expected_max)
        np.testing.assert_array_equal(extremes.running_min, expected_min)


def test_matches_pandas_rolling_with_partial_windows():
    """pandas rolling(min_periods=1) uses the same clamped-window definition."""
    series = make_random_series(400, seed=11)
    closes = pd.Series(series.close_prices)

    extremes = compute_window_extremes(series, lookback_period=30)

    np.testing.assert_array_equal(
        extremes.running_max, closes.rolling(30, min_periods=1).max().to_numpy(dtype=np.float32)
    )
    np.testing.assert_array_equal(
        extremes.running_min, closes.rolling(30, min_periods=1).min().to_numpy(dtype=np.float32)
    )


@pytest.mark.parametrize("k", [1, 5, 50, 1000])
def test_close_is_always_between_extremes(k):
    series = make_random_series(800, seed=k)
    extremes = compute_window_extremes(series, lookback_period=k)
    closes = series.close_prices

    assert (extremes.running_max >= closes).all()
    assert (closes >= extremes.running_min).all()
