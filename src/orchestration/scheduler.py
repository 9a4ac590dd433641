"""
Concurrent backtest scheduler: a fixed pool of worker threads over a job queue.

**Conceptual**: Backtesting a handful of symbols is embarrassingly parallel:
each symbol loads its own file and runs its own backtest, and the symbols
never share data. The scheduler:
  1. Puts every job in a JobQueue before starting any worker.
  2. Starts ``worker_count`` threads. Each one repeatedly pops a job, loads the
     series, runs the backtest and reports the outcome, until the queue is
     empty.
  3. Joins every thread before returning the collected outcomes.

**Locking**: Three independent locks, never nested:
  - the job queue lock, held only for the check-and-pop;
  - the outcomes lock, held only to append one outcome;
  - the output sink's lock, held only while one report block is written.
Loading and backtesting happen with no lock held, so a slow file read on one
worker never stalls the others.

**Failure isolation**: A PriceDataLoadError is reported for that symbol and the
worker moves on to the next job. Any other exception from a single job,
including one raised by the output sink while reporting it, is logged with
its traceback and recorded as a failure; it never takes the pool down.
Only strategy configuration errors, raised before the pool starts, are fatal
to a run.
"""

import logging
import threading
from typing import Callable, Iterable

from src.backtesting.engine import run_backtest
from src.backtesting.reporting import BacktestReporter
from src.data.loaders import load_symbol_history
from src.data.schemas import PriceDataLoadError, PriceSeries
from src.orchestration.jobs import BacktestJob, JobFailure, JobOutcome, JobQueue
from src.strategies.base import Strategy


logger = logging.getLogger(__name__)

DEFAULT_WORKER_COUNT = 5

# (symbol_name, location) -> PriceSeries, raising PriceDataLoadError on failure
PriceLoader = Callable[[str, str], PriceSeries]


class WorkScheduler:
    """
    Runs one strategy over many symbols with a fixed-size thread pool.

    Attributes:
        strategy: Strategy shared (read-only) by every worker.
        loader: Callable that loads one symbol's PriceSeries.
        reporter: Receives each outcome as soon as it is available.
        worker_count: Number of worker threads started per ``run`` call.
    """

    def __init__(
        self,
        strategy: Strategy,
        loader: PriceLoader = load_symbol_history,
        reporter: BacktestReporter | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
    ):
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}.")
        self.strategy = strategy
        self.loader = loader
        self.reporter = reporter if reporter is not None else BacktestReporter()
        self.worker_count = worker_count

    def run(self, jobs: Iterable[BacktestJob]) -> list[JobOutcome]:
        """
        Backtest every job and block until all workers have finished.

        Args:
            jobs: Jobs to process. Consumed once, before workers start.

        Returns:
            One outcome per job (BacktestResult or JobFailure), in completion
            order. No ordering between symbols is guaranteed.
        """
        queue = JobQueue(jobs)
        outcomes: list[JobOutcome] = []
        outcomes_lock = threading.Lock()

        def record(outcome: JobOutcome) -> None:
            with outcomes_lock:
                outcomes.append(outcome)

        logger.info(
            "Starting backtest of %d symbols with %d workers (strategy=%s)",
            len(queue), self.worker_count, self.strategy.name,
        )

        workers = [
            threading.Thread(
                target=self._worker_loop,
                args=(queue, record),
                name=f"backtest-worker-{index}",
            )
            for index in range(self.worker_count)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        logger.info("Backtest finished: %d outcomes", len(outcomes))
        return outcomes

    def _worker_loop(self, queue: JobQueue, record: Callable[[JobOutcome], None]) -> None:
        while True:
            job = queue.pop_or_none()
            if job is None:
                return
            outcome = self._process_job(job)
            record(outcome)

    def _process_job(self, job: BacktestJob) -> JobOutcome:
        logger.debug("Worker started for symbol: %s", job.symbol_name)

        try:
            series = self.loader(job.symbol_name, job.location)
            result = run_backtest(self.strategy, series)
            self.reporter.report_result(result)
        except PriceDataLoadError as e:
            logger.warning("Could not load %s: %s", job.symbol_name, e.reason)
            return self._fail(job, e)
        except Exception as e:
            logger.exception("Backtest raised for %s", job.symbol_name)
            return self._fail(job, e)

        logger.debug("Worker completed for symbol: %s", job.symbol_name)
        return result

    def _fail(self, job: BacktestJob, error: Exception) -> JobFailure:
        failure = JobFailure(job=job, reason=str(error), error_type=type(error).__name__)
        try:
            self.reporter.report_failure(job.symbol_name, failure.reason)
        except Exception:
            # The outcome is still recorded even if the sink is broken
            logger.exception("Could not report failure for %s", job.symbol_name)
        return failure


def run_scheduled_backtests(
    strategy: Strategy,
    jobs: Iterable[BacktestJob],
    worker_count: int = DEFAULT_WORKER_COUNT,
    loader: PriceLoader = load_symbol_history,
    reporter: BacktestReporter | None = None,
) -> list[JobOutcome]:
    """Convenience wrapper: build a WorkScheduler and run ``jobs`` once."""
    scheduler = WorkScheduler(
        strategy=strategy,
        loader=loader,
        reporter=reporter,
        worker_count=worker_count,
    )
    return scheduler.run(jobs)
