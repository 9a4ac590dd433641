"""
CSV reader for daily price files with schema enforcement.

**Conceptual**: This module is the *only* place price CSVs are parsed. Every
file passes through ``read_price_csv``, which validates the layout and turns
the rows into an immutable PriceSeries. Strategies, the backtest runner and the
scheduler never touch pandas I/O directly; they receive a PriceSeries or a
PriceDataLoadError.

**Rule**: Never call pd.read_csv on price files anywhere else. Keeping parsing
and validation here means a malformed file is reported once, with the path and
the problem, instead of surfacing later as a strange backtest number.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from src.data.schemas import (
    PRICE_CSV_CLOSE_COLUMN,
    PRICE_CSV_DATE_COLUMN,
    PRICE_CSV_OPEN_COLUMN,
    PRICE_CSV_REQUIRED_COLUMNS,
    PRICE_CSV_VOLUME_COLUMN,
    PriceDataLoadError,
    PriceSeries,
)


def read_price_csv(symbol_name: str, path: Path | str) -> PriceSeries:
    """
    Read a daily price CSV into a PriceSeries.

    **Functionally**:
      - Reads the file with pandas, keeping Date/Open/Close/Volume by header.
      - Parses Open/Close as float32 and Volume as int64.
      - Checks that dates parse and are strictly ascending (oldest first).
      - Returns an immutable PriceSeries labelled with ``symbol_name``.

    **Why validate order instead of sorting?**
      - An out-of-order file usually means a bad export or a concatenation
        mistake. Sorting it silently would hide that.

    Args:
        symbol_name: Display name for the symbol (e.g. "Meta").
        path: Path to the CSV file.

    Returns:
        PriceSeries with one record per CSV row. A file with a header and no
        rows yields an empty series.

    Raises:
        PriceDataLoadError: If the file is missing or unreadable, required
            columns are absent, values don't parse, or dates are not strictly
            ascending.

    Example:
        >>> series = read_price_csv("Meta", "data/META.csv")
        >>> len(series), series.records[0].date
        (252, '2022-11-01')
    """
    location = str(path)

    try:
        df = pd.read_csv(path, dtype={PRICE_CSV_DATE_COLUMN: str})
    except FileNotFoundError:
        raise PriceDataLoadError(symbol_name, location, "file not found")
    except pd.errors.EmptyDataError:
        raise PriceDataLoadError(symbol_name, location, "file is empty")
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise PriceDataLoadError(symbol_name, location, f"could not read file: {e}")

    missing_cols = set(PRICE_CSV_REQUIRED_COLUMNS) - set(df.columns)
    if missing_cols:
        raise PriceDataLoadError(
            symbol_name,
            location,
            f"missing required columns {sorted(missing_cols)}. "
            f"Expected at least {PRICE_CSV_REQUIRED_COLUMNS}, found {list(df.columns)}",
        )

    try:
        open_prices = pd.to_numeric(df[PRICE_CSV_OPEN_COLUMN], errors="raise").astype(np.float32)
        close_prices = pd.to_numeric(df[PRICE_CSV_CLOSE_COLUMN], errors="raise").astype(np.float32)
        volumes = pd.to_numeric(df[PRICE_CSV_VOLUME_COLUMN], errors="raise")
    except (ValueError, TypeError) as e:
        raise PriceDataLoadError(symbol_name, location, f"malformed numeric value: {e}")

    # NaN survives to_numeric (empty cells); reject it here
    for column, values in (
        (PRICE_CSV_OPEN_COLUMN, open_prices),
        (PRICE_CSV_CLOSE_COLUMN, close_prices),
        (PRICE_CSV_VOLUME_COLUMN, volumes),
    ):
        bad_rows = values.index[~np.isfinite(values.to_numpy(dtype=np.float64))].tolist()
        if bad_rows:
            raise PriceDataLoadError(
                symbol_name,
                location,
                f"column '{column}' has missing or non-finite values at rows {bad_rows[:5]}",
            )

    dates = df[PRICE_CSV_DATE_COLUMN]
    parsed_dates = pd.to_datetime(dates, errors="coerce")
    if parsed_dates.isna().any():
        bad_rows = parsed_dates.index[parsed_dates.isna()].tolist()
        raise PriceDataLoadError(
            symbol_name,
            location,
            f"unparseable dates at rows {bad_rows[:5]}",
        )

    if len(parsed_dates) > 1:
        diffs = parsed_dates.diff().iloc[1:]
        if not (diffs > pd.Timedelta(0)).all():
            bad_rows = diffs[diffs <= pd.Timedelta(0)].index.tolist()
            raise PriceDataLoadError(
                symbol_name,
                location,
                f"dates are not strictly ascending at rows {bad_rows[:5]} "
                f"(expected oldest first, no duplicates)",
            )

    frame = pd.DataFrame({
        "date": dates.astype(str),
        "open_price": open_prices,
        "close_price": close_prices,
        "volume": volumes.astype(np.int64),
    })
    return PriceSeries.from_frame(symbol_name, frame)
