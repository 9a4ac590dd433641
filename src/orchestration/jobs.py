"""
Job and outcome types for the backtest scheduler, plus the shared job queue.
"""

from collections import deque
from dataclasses import dataclass
import threading
from typing import Iterable

from src.backtesting.engine import BacktestResult


@dataclass(frozen=True)
class BacktestJob:
    """
    One unit of scheduled work: a symbol and where to load its prices from.

    Attributes:
        symbol_name: Display name of the symbol (e.g. "Meta").
        location: Source identifier handed to the loader (e.g. a CSV path).
    """
    symbol_name: str
    location: str


@dataclass(frozen=True)
class JobFailure:
    """
    A job that did not produce a BacktestResult.

    Attributes:
        job: The job that failed.
        reason: Human-readable description of what went wrong.
        error_type: Name of the exception class that ended the job.
    """
    job: BacktestJob
    reason: str
    error_type: str


JobOutcome = BacktestResult | JobFailure


class JobQueue:
    """
    Lock-guarded FIFO of BacktestJobs shared by the scheduler's workers.

    **Conceptual**: The queue is filled once, before any worker starts, and
    only shrinks afterwards. Workers call ``pop_or_none``, which checks and
    pops under a single lock acquisition, so there is no window between "the
    queue is not empty" and "take the front job" for another worker to slip
    into. Each job is handed to exactly one worker.
    """

    def __init__(self, jobs: Iterable[BacktestJob] = ()):
        self._lock = threading.Lock()
        self._jobs: deque[BacktestJob] = deque(jobs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def pop_or_none(self) -> BacktestJob | None:
        """Remove and return the front job, or None when the queue is empty."""
        with self._lock:
            if self._jobs:
                return self._jobs.popleft()
            return None
