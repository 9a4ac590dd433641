"""
breakout_backtester – Main entry point.

Runs the trend-following backtest over the default symbols with settings
from the environment. See actions/run_trend_following_backtest.py for flags.
"""

import sys

from actions.run_trend_following_backtest import main


if __name__ == "__main__":
    sys.exit(main())
