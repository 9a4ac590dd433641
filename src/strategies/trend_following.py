"""
Trend-following breakout strategy.

**Conceptual**: The strategy watches how far today's close has moved away from
the recent range:
  - If the close has risen far enough above the lowest close of the last K
    bars, an uptrend is starting: go long.
  - If it has fallen far enough below the highest close of the last K bars, a
    downtrend is starting: go short.
  - An open position is closed when it reaches its profit target, when it
    hits its stop-loss, or when price breaks out in the opposite direction.

**State machine** (evaluated once per bar, oldest to newest):

    FLAT  -- up_move >= enter ---------------> LONG   (ENTER_LONG)
    FLAT  -- down_move >= enter -------------> SHORT  (ENTER_SHORT)
    LONG  -- target | exit trigger | stop ---> FLAT   (EXIT_LONG)
    SHORT -- target | exit trigger | stop ---> FLAT   (EXIT_SHORT)

where ``up_move`` is the percent rise from the trailing-K minimum to today's
close and ``down_move`` the percent fall from the trailing-K maximum, both
truncated toward zero before they are compared with the integer triggers.
Target and stop-loss are measured from the entry price without truncation.

At most one signal is emitted per bar: a bar that closes a position never
opens a new one.
"""

from dataclasses import asdict, dataclass
from typing import Any

from src.analytics.window_extremes import compute_window_extremes
from src.data.schemas import PriceSeries
from src.strategies.base import (
    PositionState,
    SignalSeries,
    StrategyConfigurationError,
    TradeSignal,
)
from src.utils.math import percent_change, truncate_percent


DEFAULT_STRATEGY_NAME = "Trend Following Strategy"


@dataclass(frozen=True)
class TrendFollowingParams:
    """
    Parameters for the trend-following breakout strategy.

    All percentages are whole numbers (5 means 5%).

    Attributes:
        lookback_period: Window size K (bars) for the trailing max/min.
        enter_trigger_percent: Breakout size needed to open a position.
        exit_trigger_percent: Opposite breakout size that closes a position.
        target_percent: Gain from entry that closes a position.
        stop_loss_percent: Loss from entry that closes a position.
    """
    lookback_period: int = 90
    enter_trigger_percent: int = 5
    exit_trigger_percent: int = 5
    target_percent: int = 20
    stop_loss_percent: int = 10

    def __post_init__(self):
        """Validate parameters after initialization."""
        for name, value in asdict(self).items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise StrategyConfigurationError(
                    f"{name} must be an integer, got {value!r}."
                )
        if self.lookback_period < 1:
            raise StrategyConfigurationError(
                f"lookback_period must be >= 1, got {self.lookback_period}."
            )
        for name in (
            "enter_trigger_percent",
            "exit_trigger_percent",
            "target_percent",
            "stop_loss_percent",
        ):
            if getattr(self, name) < 0:
                raise StrategyConfigurationError(
                    f"{name} must be non-negative, got {getattr(self, name)}."
                )


class TrendFollowingStrategy:
    """
    Breakout strategy that trades both long and short.

    **How it works**:
      1. Compute trailing-K max/min closes for the whole series.
      2. Walk the bars in order with a FLAT/LONG/SHORT state and an entry price.
      3. Emit a signal whenever the state changes.

    The instance holds only its name and parameters, so the same strategy can
    be run concurrently on many series.

    Attributes:
        name: Display name used in reports.
        params: TrendFollowingParams for this instance.
    """

    def __init__(
        self,
        name: str = DEFAULT_STRATEGY_NAME,
        params: TrendFollowingParams | None = None,
    ):
        self.name = name
        self.params = params if params is not None else TrendFollowingParams()

    def __repr__(self) -> str:
        return f"TrendFollowingStrategy(name={self.name!r}, params={self.params!r})"

    def describe_params(self) -> dict[str, Any]:
        return asdict(self.params)

    def generate_signals(self, series: PriceSeries) -> SignalSeries:
        """
        Run the breakout state machine over ``series``.

        Args:
            series: Chronological price history.

        Returns:
            Tuple of TradeSignal, one per bar (empty for an empty series).

        Example:
            >>> strategy = TrendFollowingStrategy(params=TrendFollowingParams(
            ...     lookback_period=3, enter_trigger_percent=5,
            ...     exit_trigger_percent=5, target_percent=20, stop_loss_percent=10))
            >>> series = PriceSeries.from_closes("X", [100, 101, 102, 103, 110, 95])
            >>> [int(s) for s in strategy.generate_signals(series)]
            [0, 0, 0, 0, 1, -1]
        """
        params = self.params
        closes = series.close_prices
        extremes = compute_window_extremes(series, params.lookback_period)

        signals = [TradeSignal.NONE] * len(closes)
        state = PositionState.FLAT
        entry_price = None

        for i, close in enumerate(closes):
            up_move = truncate_percent(percent_change(extremes.running_min[i], close))
            down_move = truncate_percent(-percent_change(extremes.running_max[i], close))

            if state is PositionState.FLAT:
                if up_move >= params.enter_trigger_percent:
                    state = PositionState.LONG
                    entry_price = close
                    signals[i] = TradeSignal.ENTER_LONG
                elif down_move >= params.enter_trigger_percent:
                    state = PositionState.SHORT
                    entry_price = close
                    signals[i] = TradeSignal.ENTER_SHORT

            elif state is PositionState.LONG:
                change_from_entry = percent_change(entry_price, close)
                if (
                    change_from_entry >= params.target_percent
                    or down_move >= params.exit_trigger_percent
                    or -change_from_entry >= params.stop_loss_percent
                ):
                    state = PositionState.FLAT
                    entry_price = None
                    signals[i] = TradeSignal.EXIT_LONG

            elif state is PositionState.SHORT:
                change_from_entry = percent_change(entry_price, close)
                if (
                    -change_from_entry >= params.target_percent
                    or up_move >= params.exit_trigger_percent
                    or change_from_entry >= params.stop_loss_percent
                ):
                    state = PositionState.FLAT
                    entry_price = None
                    signals[i] = TradeSignal.EXIT_SHORT

        return tuple(signals)
