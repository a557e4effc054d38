"""
S3 Prefix Purge - Data Model

Value types passed between the listing loop, the delete workers and the
progress aggregator.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ObjectVersionRef:
    """One deletable entity: a specific object version or a delete marker."""

    key: str
    version_id: str

    def to_identifier(self) -> dict:
        """Shape expected in DeleteObjects' ``Delete.Objects`` list."""
        return {"Key": self.key, "VersionId": self.version_id}


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one DeleteObjects request."""

    batch_size: int
    error_count: int

    def __post_init__(self):
        if self.batch_size < 0:
            raise ValueError(f"batch_size must be >= 0, got {self.batch_size}")
        if not 0 <= self.error_count <= self.batch_size:
            raise ValueError(
                f"error_count must be within [0, {self.batch_size}], "
                f"got {self.error_count}"
            )


@dataclass
class RunningTotals:
    processed: int = 0
    errors: int = 0

    def apply(self, result: BatchResult):
        self.processed += result.batch_size
        self.errors += result.error_count


@dataclass(frozen=True)
class PurgeSummary:
    """
    Final outcome of a purge run.

    ``observed`` is counted by the listing loop, ``processed`` and ``errors``
    come from the delete responses. ``batches`` is the number of delete
    requests dispatched (or that would have been, in a dry run).
    """

    observed: int
    processed: int
    errors: int
    batches: int
    dry_run: bool = False
