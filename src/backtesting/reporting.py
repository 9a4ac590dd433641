"""
Human-readable reporting of backtest results through a serialized sink.

**Conceptual**: Several worker threads finish backtests at unpredictable times
and all want to print a multi-line summary. If they wrote to the console
directly, their lines would interleave. Instead, every report goes through an
OutputSink whose ``emit_lines`` writes a whole block atomically.

**Why an injected sink instead of a global print lock?**
  - Tests can pass a capturing sink and assert on exact output.
  - The reporter doesn't care whether output goes to stdout, a file or a list.
  - The sink's lock is its own exclusion domain, independent of the job queue
    lock, so reporting never holds up workers pulling the next job.
"""

import sys
import threading
from typing import Iterable, Protocol, TextIO

from src.backtesting.engine import BacktestResult


BANNER = "*" * 61


class OutputSink(Protocol):
    """Thread-safe destination for report lines."""

    def emit_lines(self, lines: Iterable[str]) -> None:
        """Write ``lines`` as one uninterrupted block."""
        ...


class ConsoleSink:
    """
    OutputSink that writes to a text stream (stdout by default).

    A lock owned by the sink serializes blocks from concurrent callers.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._lock = threading.Lock()

    def emit_lines(self, lines: Iterable[str]) -> None:
        text = "".join(f"{line}\n" for line in lines)
        with self._lock:
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(text)
            stream.flush()


class MemorySink:
    """OutputSink that keeps emitted blocks in memory (for tests and tooling)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._blocks: list[list[str]] = []

    def emit_lines(self, lines: Iterable[str]) -> None:
        block = list(lines)
        with self._lock:
            self._blocks.append(block)

    @property
    def blocks(self) -> list[list[str]]:
        with self._lock:
            return [list(block) for block in self._blocks]

    @property
    def lines(self) -> list[str]:
        return [line for block in self.blocks for line in block]


def _format_percent(value: float, degenerate: bool) -> str:
    if degenerate:
        return f"{value} (degenerate: zero reference price)"
    return f"{value:.4f}"


def format_backtest_result(result: BacktestResult) -> list[str]:
    """
    Format a BacktestResult as a banner block.

    The average line reads "n/a (no trades)" when nothing was traded, so a
    NaN never shows up as if it were a number.

    Example:
        >>> for line in format_backtest_result(result):
        ...     print(line)
        *************************************************************
        Symbol: Meta
        Strategy: Trend Following Strategy
        Total Trades Taken: 2
        Number Of Profitable Trades: 0
        Total Profit Percentage: -44.4056
        Average Profit Percentage Per Trade: -22.2028
        *************************************************************
    """
    degenerate = result.has_degenerate_profit
    if result.has_trades:
        average = _format_percent(result.average_profit_percent, degenerate)
    else:
        average = "n/a (no trades)"

    return [
        BANNER,
        f"Symbol: {result.symbol_name}",
        f"Strategy: {result.strategy_name}",
        f"Total Trades Taken: {result.total_trades}",
        f"Number Of Profitable Trades: {result.profitable_trades}",
        f"Total Profit Percentage: {_format_percent(result.total_profit_percent, degenerate)}",
        f"Average Profit Percentage Per Trade: {average}",
        BANNER,
    ]


class BacktestReporter:
    """
    Writes backtest outcomes to an OutputSink.

    Attributes:
        sink: Destination for report blocks.
    """

    def __init__(self, sink: OutputSink | None = None):
        self.sink = sink if sink is not None else ConsoleSink()

    def report_result(self, result: BacktestResult) -> None:
        self.sink.emit_lines(format_backtest_result(result))

    def report_failure(self, symbol_name: str, reason: str) -> None:
        self.sink.emit_lines([f"Backtest failed for {symbol_name}: {reason}"])
