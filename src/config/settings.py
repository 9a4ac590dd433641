"""
Configuration settings for the breakout backtester.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at startup, ensuring fail-fast behavior if configuration is invalid: a bad
worker count or a negative stop-loss is reported before any file is read.

**Why centralized config?**
  - Single source of truth for run-level defaults (worker count, data
    directory, strategy parameters).
  - Easy to test (construct settings directly instead of reading the environment).
  - Fail-fast validation (typo in TREND_LOOKBACK_PERIOD → clear error at
    startup, not a confusing backtest result).

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from src.strategies.trend_following import TrendFollowingParams


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Load .env from project root; variables already set in the environment win
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class BacktestSettings:
    """
    Run-level configuration for the breakout backtester.

    Attributes:
        worker_count: Number of worker threads (default 5). Must be >= 1.
        data_dir: Directory holding the per-symbol CSV files.
        log_level: Logging level name for the action script (default "INFO").
        strategy_params: Trend-following strategy parameters.
    """
    worker_count: int = 5
    data_dir: Path = PROJECT_ROOT / "data"
    log_level: str = "INFO"
    strategy_params: TrendFollowingParams = field(default_factory=TrendFollowingParams)

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.worker_count < 1:
            raise ValueError(
                f"BACKTEST_WORKER_COUNT must be >= 1, got {self.worker_count}."
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"BACKTEST_LOG_LEVEL must be one of {LOG_LEVELS}, got {self.log_level!r}."
            )

    @classmethod
    def from_env(cls) -> "BacktestSettings":
        """
        Load settings from environment variables.

        **Environment variables** (all optional):
          - BACKTEST_WORKER_COUNT: worker threads (default 5).
          - BACKTEST_DATA_DIR: CSV directory (default <project root>/data).
          - BACKTEST_LOG_LEVEL: logging level (default INFO).
          - TREND_LOOKBACK_PERIOD (default 90)
          - TREND_ENTER_TRIGGER_PERCENT (default 5)
          - TREND_EXIT_TRIGGER_PERCENT (default 5)
          - TREND_TARGET_PERCENT (default 20)
          - TREND_STOP_LOSS_PERCENT (default 10)

        Returns:
            Validated BacktestSettings.

        Raises:
            ValueError: If a variable is not an integer or is out of range.
            StrategyConfigurationError: If the strategy parameters are invalid.

        Usage example:
            >>> # In .env file:
            >>> # BACKTEST_WORKER_COUNT=8
            >>> # TREND_LOOKBACK_PERIOD=60
            >>>
            >>> settings = BacktestSettings.from_env()
            >>> settings.worker_count, settings.strategy_params.lookback_period
            (8, 60)
        """
        defaults = TrendFollowingParams()
        strategy_params = TrendFollowingParams(
            lookback_period=_int_from_env("TREND_LOOKBACK_PERIOD", defaults.lookback_period),
            enter_trigger_percent=_int_from_env("TREND_ENTER_TRIGGER_PERCENT", defaults.enter_trigger_percent),
            exit_trigger_percent=_int_from_env("TREND_EXIT_TRIGGER_PERCENT", defaults.exit_trigger_percent),
            target_percent=_int_from_env("TREND_TARGET_PERCENT", defaults.target_percent),
            stop_loss_percent=_int_from_env("TREND_STOP_LOSS_PERCENT", defaults.stop_loss_percent),
        )

        data_dir = os.getenv("BACKTEST_DATA_DIR")

        return cls(
            worker_count=_int_from_env("BACKTEST_WORKER_COUNT", 5),
            data_dir=Path(data_dir) if data_dir else PROJECT_ROOT / "data",
            log_level=os.getenv("BACKTEST_LOG_LEVEL", "INFO").upper(),
            strategy_params=strategy_params,
        )


# Lazily-loaded settings singleton. Tests construct BacktestSettings directly.
_default_settings: Optional[BacktestSettings] = None


def get_settings() -> BacktestSettings:
    """
    Get the global settings singleton, loading it from the environment on first use.

    Returns:
        Cached BacktestSettings.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = BacktestSettings.from_env()

    return _default_settings
