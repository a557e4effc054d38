"""
S3 Prefix Purge - Progress Aggregation

Fan-in side of the pipeline. Delete workers hand their BatchResult to a
single aggregator thread, which owns the running totals, prints progress
and signals the completion barrier the orchestrator waits on.
"""

import queue
import sys
import threading
from typing import Optional

from .models import BatchResult, RunningTotals
from .utils import setup_logger

logger = setup_logger("aggregator")

_STOP = object()


class PendingWork:
    """
    Completion barrier counting dispatched batches not yet reported.

    add() once per dispatched batch, done() once per received result.
    wait() blocks until nothing is pending, or re-raises the first error
    passed to abort().
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._pending = 0
        self._error: Optional[BaseException] = None

    @property
    def pending(self) -> int:
        with self._cond:
            return self._pending

    @property
    def error(self) -> Optional[BaseException]:
        with self._cond:
            return self._error

    def add(self):
        with self._cond:
            self._pending += 1

    def done(self):
        with self._cond:
            if self._pending == 0:
                raise RuntimeError("done() called with no pending work")
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()

    def abort(self, exc: BaseException):
        """Record a fatal error; only the first one is kept."""
        with self._cond:
            if self._error is None:
                self._error = exc
            self._cond.notify_all()

    def raise_if_aborted(self):
        with self._cond:
            if self._error is not None:
                raise self._error

    def wait(self):
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0 or self._error is not None)
            if self._error is not None:
                raise self._error


class ProgressAggregator:
    """
    Single consumer of BatchResults.

    RunningTotals is only touched from the aggregator thread, so updates
    are applied strictly one at a time, in arrival order.
    """

    def __init__(self, pending: PendingWork, out=None):
        self._pending = pending
        self._out = out
        self._results: queue.Queue = queue.Queue()
        self._totals = RunningTotals()
        self._thread = threading.Thread(
            target=self._run, name="progress-aggregator", daemon=True
        )

    def start(self):
        self._thread.start()

    def submit(self, result: BatchResult):
        """Queue a result; safe to call from any thread."""
        self._results.put(result)

    def stop(self):
        """Ask the aggregator thread to exit without waiting for it."""
        self._results.put(_STOP)

    def close(self) -> RunningTotals:
        """
        Stop the aggregator thread and return the final totals.

        Every result submitted before close() is applied first.
        """
        self.stop()
        self._thread.join()
        return RunningTotals(self._totals.processed, self._totals.errors)

    def _run(self):
        while True:
            result = self._results.get()
            if result is _STOP:
                break

            try:
                self._totals.apply(result)
                out = self._out or sys.stdout
                print(
                    f"{self._totals.processed} objects deleted, "
                    f"{self._totals.errors} errors",
                    file=out,
                    flush=True,
                )
            except Exception as e:
                logger.error(f"Progress aggregation failed: {e}")
                self._pending.abort(e)
                break

            self._pending.done()
