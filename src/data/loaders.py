"""
Default symbol universe and job list for the trend-following backtest.

**Conceptual**: The backtest runs over a fixed list of (symbol name, file)
pairs. This module centralizes that list so the action script, the scheduler
and the tests don't hardcode paths:
  - ``DEFAULT_SYMBOL_SOURCES`` names each symbol and its CSV filename.
  - ``build_default_jobs`` resolves the filenames under a data directory.
  - ``load_symbol_history`` is the loader callable handed to the scheduler.
"""

from pathlib import Path

from src.data.io import read_price_csv
from src.data.schemas import PriceSeries
from src.orchestration.jobs import BacktestJob


# Project root is 2 levels up from src/data/loaders.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_DATA_DIR = PROJECT_ROOT / "data"

# Display name -> CSV filename under the data directory
DEFAULT_SYMBOL_SOURCES: list[tuple[str, str]] = [
    ("Meta", "META.csv"),
    ("Tesla", "TSLA.csv"),
    ("Amazon", "AMZN.csv"),
    ("Apple", "AAPL.csv"),
    ("Google", "GOOG.csv"),
]


def load_symbol_history(symbol_name: str, location: str) -> PriceSeries:
    """
    Load one symbol's price history from its CSV location.

    This is the default ``PriceLoader`` used by the scheduler. It is a thin
    wrapper so the scheduler depends on a (symbol, location) -> PriceSeries
    callable rather than on CSV details.

    Raises:
        PriceDataLoadError: If the file is missing or malformed.
    """
    return read_price_csv(symbol_name, location)


def build_default_jobs(data_dir: Path | str | None = None) -> list[BacktestJob]:
    """
    Build the default job list with paths resolved under ``data_dir``.

    Args:
        data_dir: Directory containing the CSV files. Defaults to
                  ``<project root>/data``.

    Returns:
        One BacktestJob per entry of DEFAULT_SYMBOL_SOURCES, in list order.

    Example:
        >>> [job.symbol_name for job in build_default_jobs("/tmp/prices")]
        ['Meta', 'Tesla', 'Amazon', 'Apple', 'Google']
    """
    base = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR
    return [
        BacktestJob(symbol_name=symbol_name, location=str(base / filename))
        for symbol_name, filename in DEFAULT_SYMBOL_SOURCES
    ]
