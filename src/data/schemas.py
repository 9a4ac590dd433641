"""
Price data model and CSV schema for daily price files.

**Conceptual**: This module defines the "data contract" between the loader and
the backtest core. A PriceSeries is an ordered, immutable sequence of daily
records for one symbol; once the loader has built it, nothing downstream can
change it, which is what makes it safe to hand from the loader to a worker
thread to the strategy without copying or locking.

**Schema philosophy**:
  - Daily price files follow the Yahoo Finance export layout
    (Date, Open, High, Low, Close, Adj Close, Volume).
  - Only date, open, close and volume are kept in memory.
  - Rows are strictly ascending by date (oldest first, index 0 = earliest).
  - Prices are stored as 32-bit floats, volume as a 64-bit integer.
  - Any violation raises PriceDataLoadError with the file and the problem.
"""

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
import pandas as pd


class PriceDataLoadError(Exception):
    """
    Raised when a price file cannot be turned into a PriceSeries.

    **Conceptual**: Covers both "the source is unreadable" (missing file,
    permission denied, empty file) and "the source is malformed" (missing
    columns, unparseable numbers, dates out of order). A load error belongs to
    one symbol only: the scheduler reports it and moves on to the next job.

    Attributes:
        symbol_name: Symbol whose data failed to load.
        location: Path or identifier of the source.
    """

    def __init__(self, symbol_name: str, location: str, reason: str):
        self.symbol_name = symbol_name
        self.location = location
        self.reason = reason
        super().__init__(f"{symbol_name} ({location}): {reason}")


# Columns read from a daily price CSV, keyed by their header name
PRICE_CSV_DATE_COLUMN = "Date"
PRICE_CSV_OPEN_COLUMN = "Open"
PRICE_CSV_CLOSE_COLUMN = "Close"
PRICE_CSV_VOLUME_COLUMN = "Volume"

PRICE_CSV_REQUIRED_COLUMNS = [
    PRICE_CSV_DATE_COLUMN,
    PRICE_CSV_OPEN_COLUMN,
    PRICE_CSV_CLOSE_COLUMN,
    PRICE_CSV_VOLUME_COLUMN,
]

# In-memory frame layout used by PriceSeries.to_frame / from_frame
FRAME_COLUMNS = ["date", "open_price", "close_price", "volume"]


@dataclass(frozen=True)
class PriceRecord:
    """
    One daily bar.

    Attributes:
        date: Date label as it appears in the source (e.g. "2023-01-03").
        open_price: Opening price (float32).
        close_price: Closing price (float32). Used by every calculation.
        volume: Traded volume (int64).
    """
    date: str
    open_price: np.float32
    close_price: np.float32
    volume: np.int64

    def __post_init__(self):
        # Normalize storage precision regardless of what the caller passed
        object.__setattr__(self, "open_price", np.float32(self.open_price))
        object.__setattr__(self, "close_price", np.float32(self.close_price))
        object.__setattr__(self, "volume", np.int64(self.volume))


@dataclass(frozen=True)
class PriceSeries:
    """
    Chronological daily price history for one symbol.

    **Conceptual**: The unit of work in a backtest. It is created by the
    loader, owned by exactly one worker while that worker runs the backtest,
    and never modified. Records are held in a tuple, and the closing prices
    are exposed as a read-only float32 array for the numeric passes.

    Attributes:
        symbol_name: Display name of the symbol (e.g. "Meta").
        records: Records in chronological order (index 0 = earliest).
    """
    symbol_name: str
    records: tuple[PriceRecord, ...] = ()
    _close_prices: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        records = tuple(self.records)
        object.__setattr__(self, "records", records)
        closes = np.array([r.close_price for r in records], dtype=np.float32)
        closes.setflags(write=False)
        object.__setattr__(self, "_close_prices", closes)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def close_prices(self) -> np.ndarray:
        """Closing prices as a read-only float32 array of length N."""
        return self._close_prices

    @classmethod
    def from_closes(cls, symbol_name: str, closes: Iterable[float]) -> "PriceSeries":
        """
        Build a series from closing prices only.

        Dates are synthetic day labels ("day-0", "day-1", ...), open equals
        close and volume is zero. Handy for tests and quick experiments where
        only the closes matter.
        """
        records = [
            PriceRecord(date=f"day-{i}", open_price=close, close_price=close, volume=0)
            for i, close in enumerate(closes)
        ]
        return cls(symbol_name=symbol_name, records=tuple(records))

    @classmethod
    def from_frame(cls, symbol_name: str, df: pd.DataFrame) -> "PriceSeries":
        """
        Build a series from a DataFrame with columns ``FRAME_COLUMNS``.

        The frame must already be in chronological order.

        Raises:
            KeyError: If any of the frame columns is missing.
        """
        missing = set(FRAME_COLUMNS) - set(df.columns)
        if missing:
            raise KeyError(
                f"DataFrame for '{symbol_name}' is missing columns {sorted(missing)}. "
                f"Expected: {FRAME_COLUMNS}."
            )
        records = [
            PriceRecord(
                date=str(row.date),
                open_price=row.open_price,
                close_price=row.close_price,
                volume=row.volume,
            )
            for row in df[FRAME_COLUMNS].itertuples(index=False)
        ]
        return cls(symbol_name=symbol_name, records=tuple(records))

    def to_frame(self) -> pd.DataFrame:
        """Return the records as a DataFrame with columns ``FRAME_COLUMNS``."""
        return pd.DataFrame(
            {
                "date": [r.date for r in self.records],
                "open_price": np.array([r.open_price for r in self.records], dtype=np.float32),
                "close_price": self.close_prices.copy(),
                "volume": np.array([r.volume for r in self.records], dtype=np.int64),
            },
            columns=FRAME_COLUMNS,
        )
