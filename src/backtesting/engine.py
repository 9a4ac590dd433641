"""
Single-symbol backtest runner.

**Conceptual**: The runner is the glue between a strategy and the trade
evaluator. For one (strategy, price series) pair it:
  1. Asks the strategy for one signal per bar.
  2. Replays the signals with the evaluator.
  3. Packages the statistics, symbol and strategy name in a BacktestResult.

**Why a separate runner?**
  - The scheduler only needs "run one symbol, get one result"; it doesn't care
    how signals or statistics are produced.
  - Reproducible: the runner keeps no state between calls, so the same inputs
    always give a bit-identical result, and many runs can proceed in parallel
    on different series.
"""

from dataclasses import dataclass
import math

from src.backtesting.evaluator import evaluate_trades
from src.data.schemas import PriceSeries
from src.strategies.base import Strategy


@dataclass(frozen=True)
class BacktestResult:
    """
    Outcome of backtesting one strategy on one symbol.

    Attributes:
        symbol_name: Symbol the backtest ran on.
        strategy_name: Name of the strategy that produced the signals.
        total_trades: Number of closed trades (>= 0).
        profitable_trades: Closed trades with positive profit (<= total_trades).
        total_profit_percent: Sum of per-trade profit percentages.
        average_profit_percent: ``total_profit_percent / total_trades``, or NaN
            when no trade was closed. Check ``has_trades`` before using it.
    """
    symbol_name: str
    strategy_name: str
    total_trades: int
    profitable_trades: int
    total_profit_percent: float
    average_profit_percent: float

    @property
    def has_trades(self) -> bool:
        return self.total_trades > 0

    @property
    def has_degenerate_profit(self) -> bool:
        """True when a zero price turned the profit total into inf/NaN."""
        return not math.isfinite(self.total_profit_percent)


def run_backtest(strategy: Strategy, series: PriceSeries) -> BacktestResult:
    """
    Backtest ``strategy`` on one price series.

    Args:
        strategy: Any object implementing the Strategy protocol.
        series: Chronological price history for one symbol.

    Returns:
        BacktestResult for the symbol. An empty series yields zero trades.

    Example:
        >>> result = run_backtest(TrendFollowingStrategy(), series)
        >>> result.total_trades, result.profitable_trades
        (14, 6)
    """
    signals = strategy.generate_signals(series)
    stats = evaluate_trades(series, signals)

    return BacktestResult(
        symbol_name=series.symbol_name,
        strategy_name=strategy.name,
        total_trades=stats.total_trades,
        profitable_trades=stats.profitable_trades,
        total_profit_percent=stats.total_profit_percent,
        average_profit_percent=stats.average_profit_percent,
    )
