"""
S3 Prefix Purge - Orchestrator

Drives a purge run through three phases:

1. Listing: page through every version and delete marker under the prefix,
   feed each one to the batch accumulator and hand every sealed batch to a
   delete worker without waiting for it
2. Draining: flush the last partial batch, if any, to one more worker
3. Done: wait until every dispatched batch has been reported to the
   aggregator, then return the summary

At most `max_workers` delete requests are in flight; listing pauses while
all worker slots are busy. Any fatal error (listing failure, out-of-prefix
key, failed delete request) stops the run and propagates to the caller.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .aggregator import PendingWork, ProgressAggregator
from .batching import Batch, BatchAccumulator, check_in_scope, normalize_prefix
from .config import PURGE, S3
from .errors import ConfigurationError
from .models import PurgeSummary
from .s3_utils import delete_object_versions, iter_object_versions
from .utils import setup_logger

logger = setup_logger("purger")


def validate_settings(batch_size: int, max_workers: int):
    """
    Check batch size and worker count against the DeleteObjects limits.

    Raises:
        ConfigurationError: If either value is out of range
    """
    if not 1 <= batch_size <= S3["MAX_DELETE_BATCH"]:
        raise ConfigurationError(
            f"illegal batch size {batch_size}: must be between 1 and "
            f"{S3['MAX_DELETE_BATCH']}"
        )
    if max_workers < 1:
        raise ConfigurationError(
            f"illegal worker count {max_workers}: must be at least 1"
        )


class PrefixPurger:
    """Permanently delete every object version under a prefix."""

    def __init__(
        self,
        client,
        bucket: str,
        prefix: str = "",
        batch_size: Optional[int] = None,
        max_workers: Optional[int] = None,
        dry_run: bool = False,
        out=None,
    ):
        """
        Args:
            client: boto3 S3 client, shared by listing and all workers
            bucket: Bucket to purge
            prefix: Key prefix; normalized to folder form ("a/b" -> "a/b/")
            batch_size: Versions per DeleteObjects request, 1..1000
            max_workers: Maximum concurrent delete requests
            dry_run: List and batch, but never call DeleteObjects
            out: Stream for progress lines (stdout if None)

        Raises:
            ConfigurationError: If bucket, batch_size or max_workers is invalid
        """
        if not bucket:
            raise ConfigurationError("bucket is required")

        batch_size = PURGE["BATCH_SIZE"] if batch_size is None else batch_size
        max_workers = PURGE["MAX_WORKERS"] if max_workers is None else max_workers

        validate_settings(batch_size, max_workers)

        self.client = client
        self.bucket = bucket
        self.prefix = normalize_prefix(prefix)
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.dry_run = dry_run
        self.out = out

    def run(self) -> PurgeSummary:
        """
        Execute the purge.

        Returns:
            PurgeSummary with the observed count and the delete totals

        Raises:
            ListingError: If paging fails
            ScopeViolationError: If a listed key is outside the prefix
            DeleteRequestError: If a DeleteObjects request fails
        """
        logger.info(
            f"Purging s3://{self.bucket}/{self.prefix} "
            f"(batch={self.batch_size}, workers={self.max_workers}"
            f"{', dry run' if self.dry_run else ''})"
        )

        accumulator = BatchAccumulator(self.batch_size)
        pending = PendingWork()
        aggregator = ProgressAggregator(pending, out=self.out)
        slots = threading.BoundedSemaphore(self.max_workers)
        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="delete-worker"
        )

        observed = 0
        batches = 0

        def dispatch(batch: Batch):
            nonlocal batches
            batches += 1

            if self.dry_run:
                logger.debug(f"Dry run: would delete batch {batches} ({len(batch)} objects)")
                return

            slots.acquire()
            try:
                pending.raise_if_aborted()
            except BaseException:
                slots.release()
                raise

            pending.add()
            future = executor.submit(delete_object_versions, self.client, self.bucket, batch)
            future.add_done_callback(on_batch_done)

        def on_batch_done(future: Future):
            try:
                if future.cancelled():
                    return

                exc = future.exception()
                if exc is not None:
                    pending.abort(exc)
                    return

                aggregator.submit(future.result())
            finally:
                slots.release()

        aggregator.start()
        try:
            # Listing
            for entry in iter_object_versions(self.client, self.bucket, self.prefix):
                pending.raise_if_aborted()
                check_in_scope(entry, self.prefix)
                observed += 1
                batch = accumulator.observe(entry)
                if batch is not None:
                    dispatch(batch)

            # Draining
            pending.raise_if_aborted()
            batch = accumulator.flush()
            if batch is not None:
                dispatch(batch)

            # Done
            logger.debug(f"Listing complete: {observed} objects in {batches} batches")
            pending.wait()
        except BaseException:
            executor.shutdown(wait=False, cancel_futures=True)
            aggregator.stop()
            raise

        executor.shutdown(wait=True)
        totals = aggregator.close()

        if not self.dry_run and totals.processed != observed:
            logger.warning(
                f"Observed {observed} objects but delete responses covered "
                f"{totals.processed}"
            )

        logger.info(
            f"Purge of s3://{self.bucket}/{self.prefix} finished: "
            f"{observed} objects, {batches} batches, {totals.errors} errors"
        )

        return PurgeSummary(
            observed=observed,
            processed=totals.processed,
            errors=totals.errors,
            batches=batches,
            dry_run=self.dry_run,
        )
