#!/usr/bin/env python3
"""
Run the trend-following breakout backtest over the default symbol universe.

**Purpose**: Loads each symbol's daily price CSV, runs the trend-following
strategy on a pool of worker threads, and prints one summary block per symbol
as soon as its backtest finishes.

**Usage**:
    python actions/run_trend_following_backtest.py
    python actions/run_trend_following_backtest.py --workers 8 --lookback 60
    python actions/run_trend_following_backtest.py --data-dir /path/to/csvs

**Inputs**: ``<data dir>/META.csv``, ``TSLA.csv``, ``AMZN.csv``, ``AAPL.csv``,
``GOOG.csv`` in Yahoo Finance daily export format. Defaults come from
environment variables / .env (see src/config/settings.py); command line flags
override them.

**Exit codes**:
  - 0: Every symbol was backtested.
  - 1: Configuration error (bad worker count or strategy parameters).
  - 2: At least one symbol failed to load or run (others still reported).
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.backtesting.reporting import BacktestReporter, ConsoleSink
from src.config.settings import BacktestSettings, get_settings
from src.data.loaders import build_default_jobs
from src.orchestration.jobs import JobFailure
from src.orchestration.scheduler import WorkScheduler
from src.strategies.base import StrategyConfigurationError
from src.strategies.trend_following import TrendFollowingStrategy


logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """
    Parse command line arguments.

    Every flag defaults to None, meaning "use the value from settings".
    """
    parser = argparse.ArgumentParser(
        description="Backtest the trend-following breakout strategy over the default symbols",
        epilog="""
Examples:
  # Default settings (5 workers, lookback 90, enter/exit 5%, target 20%, stop 10%)
  python actions/run_trend_following_backtest.py

  # Shorter lookback with more workers
  python actions/run_trend_following_backtest.py --workers 8 --lookback 60
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--workers", type=int, default=None, help="Number of worker threads")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory with the symbol CSV files")
    parser.add_argument("--lookback", type=int, default=None, help="Lookback period K in bars")
    parser.add_argument("--enter-trigger", type=int, default=None, help="Enter trigger percent")
    parser.add_argument("--exit-trigger", type=int, default=None, help="Exit trigger percent")
    parser.add_argument("--target", type=int, default=None, help="Target percent")
    parser.add_argument("--stop-loss", type=int, default=None, help="Stop-loss percent")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def apply_overrides(settings: BacktestSettings, args) -> BacktestSettings:
    """Return ``settings`` with any command line overrides applied (validated again)."""
    param_overrides = {
        "lookback_period": args.lookback,
        "enter_trigger_percent": args.enter_trigger,
        "exit_trigger_percent": args.exit_trigger,
        "target_percent": args.target,
        "stop_loss_percent": args.stop_loss,
    }
    strategy_params = dataclasses.replace(
        settings.strategy_params,
        **{k: v for k, v in param_overrides.items() if v is not None},
    )

    settings_overrides = {
        "worker_count": args.workers,
        "data_dir": Path(args.data_dir) if args.data_dir else None,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    return dataclasses.replace(
        settings,
        strategy_params=strategy_params,
        **{k: v for k, v in settings_overrides.items() if v is not None},
    )


def main(argv=None) -> int:
    """
    Main entrypoint.

    Steps:
      1. Load settings and apply command line overrides.
      2. Build the strategy (fails fast on bad parameters).
      3. Run the scheduler over the default jobs.
      4. Return an exit code reflecting per-symbol failures.
    """
    args = parse_args(argv)

    try:
        settings = apply_overrides(get_settings(), args)
        strategy = TrendFollowingStrategy(params=settings.strategy_params)
    except (StrategyConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )
    logger.info("Strategy parameters: %s", strategy.describe_params())

    scheduler = WorkScheduler(
        strategy=strategy,
        reporter=BacktestReporter(ConsoleSink()),
        worker_count=settings.worker_count,
    )
    outcomes = scheduler.run(build_default_jobs(settings.data_dir))

    failures = [o for o in outcomes if isinstance(o, JobFailure)]
    if failures:
        logger.warning(
            "%d of %d symbols failed: %s",
            len(failures), len(outcomes), ", ".join(f.job.symbol_name for f in failures),
        )
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
