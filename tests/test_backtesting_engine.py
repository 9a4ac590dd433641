"""
Tests for the single-symbol backtest runner.

This module tests that run_backtest:
  - Combines strategy signals and evaluator statistics correctly.
  - Handles empty and degenerate series without crashing.
  - Is deterministic (same inputs give a bit-identical result).
  - Works with any object implementing the Strategy protocol.
"""

import math

import numpy as np
import pytest

from src.backtesting.engine import BacktestResult, run_backtest
from src.data.schemas import PriceSeries
from src.strategies.base import TradeSignal
from src.strategies.trend_following import TrendFollowingParams, TrendFollowingStrategy


SCENARIO_CLOSES = [100, 101, 102, 103, 110, 95, 90, 85, 130, 140]


class BuyFirstSellLastStrategy:
    """Minimal Strategy: long on the first bar, exit on the last."""

    name = "Buy First Sell Last"

    def describe_params(self):
        return {}

    def generate_signals(self, series):
        n = len(series)
        if n < 2:
            return (TradeSignal.NONE,) * n
        return (TradeSignal.ENTER_LONG,) + (TradeSignal.NONE,) * (n - 2) + (TradeSignal.EXIT_LONG,)


def scenario_strategy() -> TrendFollowingStrategy:
    return TrendFollowingStrategy(
        params=TrendFollowingParams(
            lookback_period=3,
            enter_trigger_percent=5,
            exit_trigger_percent=5,
            target_percent=20,
            stop_loss_percent=10,
        )
    )


def assert_bit_identical(a: BacktestResult, b: BacktestResult):
    assert a.symbol_name == b.symbol_name
    assert a.strategy_name == b.strategy_name
    assert a.total_trades == b.total_trades
    assert a.profitable_trades == b.profitable_trades
    assert np.float64(a.total_profit_percent).tobytes() == np.float64(b.total_profit_percent).tobytes()
    assert np.float64(a.average_profit_percent).tobytes() == np.float64(b.average_profit_percent).tobytes()


def test_scenario_result():
    series = PriceSeries.from_closes("Scenario", SCENARIO_CLOSES)
    result = run_backtest(scenario_strategy(), series)

    expected_total = (95 - 110) * 100 / 110 + (90 - 130) * 100 / 130
    assert result.symbol_name == "Scenario"
    assert result.strategy_name == "Trend Following Strategy"
    assert result.total_trades == 2
    assert result.profitable_trades == 0
    assert result.total_profit_percent == pytest.approx(expected_total, rel=1e-5)
    assert result.average_profit_percent == pytest.approx(expected_total / 2, rel=1e-5)
    assert result.has_trades
    assert not result.has_degenerate_profit


def test_empty_series_yields_zero_trades():
    result = run_backtest(scenario_strategy(), PriceSeries.from_closes("Empty", []))

    assert result.total_trades == 0
    assert result.profitable_trades == 0
    assert not result.has_trades
    assert math.isnan(result.average_profit_percent)


@pytest.mark.parametrize("lookback", [1, 5, 90, 10_000])
def test_empty_series_any_configuration(lookback):
    strategy = TrendFollowingStrategy(params=TrendFollowingParams(lookback_period=lookback))
    result = run_backtest(strategy, PriceSeries.from_closes("Empty", []))

    assert result.total_trades == 0


def test_lookback_longer_than_series():
    strategy = TrendFollowingStrategy(params=TrendFollowingParams(lookback_period=200))
    result = run_backtest(strategy, PriceSeries.from_closes("Short", SCENARIO_CLOSES))

    assert 0 <= result.profitable_trades <= result.total_trades


def test_runs_are_bit_identical():
    rng = np.random.default_rng(42)
    closes = 100 * np.exp(np.cumsum(rng.normal(0.0, 0.025, 2000)))
    series = PriceSeries.from_closes("Random", closes)
    strategy = TrendFollowingStrategy(params=TrendFollowingParams(lookback_period=30))

    first = run_backtest(strategy, series)
    second = run_backtest(strategy, series)

    assert first.total_trades > 0
    assert_bit_identical(first, second)


def test_accepts_any_strategy_protocol_implementation():
    series = PriceSeries.from_closes("Custom", [100, 120, 150])
    result = run_backtest(BuyFirstSellLastStrategy(), series)

    assert result.strategy_name == "Buy First Sell Last"
    assert result.total_trades == 1
    assert result.total_profit_percent == pytest.approx(50.0)


def test_degenerate_profit_is_flagged():
    series = PriceSeries.from_closes("Zero", [0, 10])
    result = run_backtest(BuyFirstSellLastStrategy(), series)

    assert result.has_degenerate_profit
