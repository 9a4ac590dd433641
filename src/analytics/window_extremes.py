"""
Trailing-window maximum and minimum of closing prices.

**Conceptual**: A breakout strategy asks, at every bar, "how far is today's
close from the highest and lowest close of the last K days?". This module
answers the first half of that question: for each index i it returns the max
and min closing price over the trailing window ``[max(0, i-K+1), i]``.

**Algorithm**: A monotonic deque of indices, one pass per extreme. For the
maximum, the deque holds indices whose prices are strictly decreasing from
front to back:
  1. Drop indices from the front that have left the window (``<= i - K``).
  2. Drop indices from the back whose price is ``<=`` the current price
     (they can never be the maximum again while ``i`` is in the window).
  3. Append ``i``; the front of the deque is the window maximum.
The minimum mirrors this with the comparison reversed. Each index is pushed
and popped at most once, so the whole pass is O(N).

**Window clamping**: At the start of the series (and for any K larger than the
series), the window simply starts at index 0. ``K > N`` is not an error: it
yields the running all-time extreme.
"""

from collections import deque
from dataclasses import dataclass
import operator
from typing import Callable

import numpy as np

from src.data.schemas import PriceSeries


@dataclass(frozen=True)
class WindowExtremes:
    """
    Trailing-window extremes for one price series.

    Attributes:
        lookback_period: Window size K used to compute the arrays.
        running_max: ``running_max[i]`` = max close over the trailing window at i.
        running_min: ``running_min[i]`` = min close over the trailing window at i.
    """
    lookback_period: int
    running_max: np.ndarray
    running_min: np.ndarray

    def __len__(self) -> int:
        return len(self.running_max)


def _sliding_extreme(
    values: np.ndarray,
    window: int,
    evicts: Callable[[float, float], bool],
) -> np.ndarray:
    # evicts(current, back) is True when the back index can be discarded
    n = len(values)
    result = np.empty(n, dtype=values.dtype)
    candidates: deque[int] = deque()

    for i in range(n):
        while candidates and candidates[0] <= i - window:
            candidates.popleft()
        while candidates and evicts(values[i], values[candidates[-1]]):
            candidates.pop()
        candidates.append(i)
        result[i] = values[candidates[0]]

    result.setflags(write=False)
    return result


def compute_running_max(close_prices: np.ndarray, lookback_period: int) -> np.ndarray:
    """Trailing-window maximum of ``close_prices`` (see module docstring)."""
    _validate_lookback(lookback_period)
    return _sliding_extreme(np.asarray(close_prices), lookback_period, operator.ge)


def compute_running_min(close_prices: np.ndarray, lookback_period: int) -> np.ndarray:
    """Trailing-window minimum of ``close_prices`` (see module docstring)."""
    _validate_lookback(lookback_period)
    return _sliding_extreme(np.asarray(close_prices), lookback_period, operator.le)


def compute_window_extremes(series: PriceSeries, lookback_period: int) -> WindowExtremes:
    """
    Compute trailing max and min closing prices for every bar of a series.

    **Functionally**:
    - Input: a PriceSeries (chronological, oldest first) and window size K.
    - Output: WindowExtremes with two read-only float32 arrays of length N.
    - The arrays are recomputed on every call; nothing is cached on the series.

    **Edge cases**:
    - Empty series: both arrays are empty.
    - ``lookback_period > len(series)``: every window starts at index 0.

    Args:
        series: Price series to scan.
        lookback_period: Window size K (must be >= 1).

    Returns:
        WindowExtremes with ``running_max`` and ``running_min``.

    Raises:
        ValueError: If ``lookback_period < 1``.

    Example:
        >>> extremes = compute_window_extremes(series, lookback_period=3)
        >>> extremes.running_max[4], extremes.running_min[4]
        (110.0, 102.0)
    """
    closes = series.close_prices
    return WindowExtremes(
        lookback_period=lookback_period,
        running_max=compute_running_max(closes, lookback_period),
        running_min=compute_running_min(closes, lookback_period),
    )


def _validate_lookback(lookback_period: int) -> None:
    if lookback_period < 1:
        raise ValueError(
            f"lookback_period must be >= 1, got {lookback_period}."
        )
