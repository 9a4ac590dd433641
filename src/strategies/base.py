"""
Strategy interface and shared signal types for backtesting.

**Conceptual**: This module defines the contract between strategies and the
backtest runner. A Strategy looks at a whole PriceSeries and returns one
TradeSignal per bar: enter long, exit long, enter short, exit short, or do
nothing. The runner feeds those signals to the trade evaluator; it never needs
to know how a particular strategy made its decisions.

**Why a strategy interface?**
  - Extensibility: New strategies plug into the runner without modifying it.
  - Testability: The evaluator can be tested with hand-written signal
    sequences, and strategies can be tested without running the evaluator.
  - Reporting: Every strategy carries a name and its named parameters, so
    reports say which configuration produced a result.
"""

from enum import Enum, IntEnum
from typing import Any, Protocol

from src.data.schemas import PriceSeries


class StrategyConfigurationError(ValueError):
    """
    Raised when a strategy is constructed with unusable parameters.

    **Conceptual**: Configuration errors are fatal to the whole run, not to a
    single symbol: a bad lookback period would make every backtest
    meaningless. They are raised at construction time, before any worker
    starts.
    """
    pass


class TradeSignal(IntEnum):
    """
    Per-bar trade action emitted by a strategy.

    The integer codes are stable and can be used when exporting signals:
    positive codes open a position, negative codes close one.
    """
    NONE = 0
    ENTER_LONG = 1
    EXIT_LONG = -1
    ENTER_SHORT = 2
    EXIT_SHORT = -2

    @property
    def is_entry(self) -> bool:
        return self in (TradeSignal.ENTER_LONG, TradeSignal.ENTER_SHORT)

    @property
    def is_exit(self) -> bool:
        return self in (TradeSignal.EXIT_LONG, TradeSignal.EXIT_SHORT)


class PositionState(Enum):
    """Position held by a strategy while it scans a series."""
    FLAT = "flat"
    LONG = "long"
    SHORT = "short"


# One signal per bar, same length and order as the PriceSeries
SignalSeries = tuple[TradeSignal, ...]


class Strategy(Protocol):
    """
    Strategy interface for backtesting.

    **Conceptual**: A Strategy turns a complete price history into a sequence
    of trade signals. Strategies hold only their configuration; any position
    tracking happens inside ``generate_signals`` and is discarded when it
    returns. That makes one strategy instance safe to share across worker
    threads.

    This is a Protocol (structural typing), not an ABC: any object with a
    ``name``, a ``describe_params`` method and a ``generate_signals`` method
    matching these signatures can be used.
    """

    name: str

    def describe_params(self) -> dict[str, Any]:
        """Return the strategy's named configuration values."""
        ...

    def generate_signals(self, series: PriceSeries) -> SignalSeries:
        """
        Generate one trade signal per bar of ``series``.

        Args:
            series: Chronological price history for one symbol.

        Returns:
            Tuple of TradeSignal with ``len(series)`` entries. Bars where the
            strategy takes no action hold ``TradeSignal.NONE``.
        """
        ...
