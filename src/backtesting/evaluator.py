"""
Trade evaluator: turns a signal sequence into realized-trade statistics.

**Conceptual**: The strategy only says *when* to enter and exit. The evaluator
replays those signals against the closing prices and measures what each
round-trip earned:
  - Long trade:  profit % = (exit - entry) * 100 / entry
  - Short trade: profit % = (entry - exit) * 100 / exit
The short formula uses the exit price as the reference, so a short is
profitable when the price fell.

Per-trade profits are summed (no compounding, no position sizing, no costs).
"""

from dataclasses import dataclass
import math

import numpy as np

from src.data.schemas import PriceSeries
from src.strategies.base import SignalSeries, TradeSignal
from src.utils.math import percent_change


@dataclass(frozen=True)
class TradeStatistics:
    """
    Aggregate statistics over all realized trades of one backtest.

    Attributes:
        total_trades: Number of closed trades.
        profitable_trades: Closed trades with a strictly positive profit.
        total_profit_percent: Sum of per-trade profit percentages.
    """
    total_trades: int = 0
    profitable_trades: int = 0
    total_profit_percent: float = 0.0

    @property
    def average_profit_percent(self) -> float:
        """Mean profit per trade, or NaN when no trade was closed."""
        if self.total_trades == 0:
            return math.nan
        return self.total_profit_percent / self.total_trades


def evaluate_trades(series: PriceSeries, signals: SignalSeries) -> TradeStatistics:
    """
    Replay ``signals`` over ``series`` and compute realized-trade statistics.

    **Functionally**:
      - ENTER_LONG / ENTER_SHORT record the bar's close as the open price.
      - EXIT_LONG / EXIT_SHORT compute the trade's profit and accumulate it.
      - NONE does nothing.
      - A position still open at the end of the series is not counted.

    **Zero prices**: A zero entry or exit price produces an infinite or NaN
    profit. It is accumulated as-is so the total shows it, rather than being
    dropped silently.

    Args:
        series: Price history the signals were generated from.
        signals: One TradeSignal per bar of ``series``.

    Returns:
        TradeStatistics for the run.

    Raises:
        ValueError: If the lengths differ, or an exit appears before any entry.

    Example:
        >>> series = PriceSeries.from_closes("X", [100, 110])
        >>> stats = evaluate_trades(series, (TradeSignal.ENTER_LONG, TradeSignal.EXIT_LONG))
        >>> stats.total_trades, stats.total_profit_percent
        (1, 10.0)
    """
    closes = series.close_prices
    if len(signals) != len(closes):
        raise ValueError(
            f"Signal count ({len(signals)}) does not match price count ({len(closes)}) "
            f"for '{series.symbol_name}'."
        )

    open_price = None
    total_trades = 0
    profitable_trades = 0
    total_profit = np.float32(0.0)

    with np.errstate(invalid="ignore", over="ignore"):
        for i, raw_signal in enumerate(signals):
            signal = TradeSignal(raw_signal)
            close = closes[i]
            if signal.is_entry:
                open_price = close
                continue
            if not signal.is_exit:
                continue

            if open_price is None:
                raise ValueError(
                    f"{signal.name} at bar {i} of '{series.symbol_name}' "
                    f"has no preceding entry signal."
                )

            if signal is TradeSignal.EXIT_LONG:
                profit = percent_change(open_price, close)
            else:
                profit = percent_change(close, open_price)

            total_profit = total_profit + profit
            total_trades += 1
            if profit > 0:
                profitable_trades += 1

    return TradeStatistics(
        total_trades=total_trades,
        profitable_trades=profitable_trades,
        total_profit_percent=float(total_profit),
    )
