"""
Percentage arithmetic shared by the strategy and the trade evaluator.

**Conceptual**: Every decision in the trend-following strategy is phrased as
"how many percent did the price move from A to B?". Both the signal engine
(breakout detection, target, stop-loss) and the evaluator (realized profit per
trade) use the same formula, so it lives here once.

**Precision**: Prices are stored as 32-bit floats, and all percentage math is
done in float32 as well. Keeping the arithmetic at the storage precision makes
results reproducible bit-for-bit across runs and platforms.

**Zero denominators**: A zero reference price does not raise. The result is
the IEEE sentinel (``inf``, ``-inf`` or ``nan``) and callers decide how it
flows into their output.
"""

import math

import numpy as np


_HUNDRED = np.float32(100)


def percent_change(start_value: float, end_value: float) -> np.float32:
    """
    Percentage change from ``start_value`` to ``end_value``.

    **Mathematical**:
        pct = (end - start) * 100 / start

    **Functionally**:
    - Both inputs are coerced to float32 and the computation stays in float32.
    - A positive result means the price rose, negative means it fell.
    - ``start_value == 0`` yields ``inf``/``-inf`` (or ``nan`` when both are 0)
      without emitting a RuntimeWarning.

    Args:
        start_value: Reference price (denominator).
        end_value: Later price.

    Returns:
        Percentage change as a numpy float32 scalar.

    Example:
        >>> float(percent_change(100.0, 110.0))
        10.0
        >>> float(percent_change(110.0, 99.0))
        -10.0
    """
    start = np.float32(start_value)
    end = np.float32(end_value)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (end - start) * _HUNDRED / start


def truncate_percent(value: float) -> float:
    """
    Truncate a percentage toward zero for threshold comparisons.

    **Conceptual**: The breakout triggers compare *whole* percentages against
    integer thresholds: a 7.8% move counts as 7%, and a -4.9% move counts as
    -4%. This makes the strategy slightly less sensitive than a fractional
    comparison would be, and the behavior is kept as-is because changing it
    changes when trades trigger.

    Non-finite values (from a zero reference price) are returned unchanged so
    that ``nan`` never satisfies a threshold and ``inf`` always does.

    Args:
        value: Percentage to truncate.

    Returns:
        The truncated percentage as a float.

    Example:
        >>> truncate_percent(7.84)
        7.0
        >>> truncate_percent(-4.9)
        -4.0
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    return float(math.trunc(value))
