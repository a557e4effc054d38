"""
S3 Prefix Purge - Batching

Groups listed object versions into DeleteObjects-sized batches and guards
against entries outside the requested prefix.
"""

from typing import List, Optional, Tuple

from .errors import ScopeViolationError
from .models import ObjectVersionRef

Batch = Tuple[ObjectVersionRef, ...]


def normalize_prefix(raw: str) -> str:
    """
    Normalize a user-supplied prefix to folder form.

    Leading and trailing slashes are trimmed and a single trailing slash is
    re-appended when anything is left: "/logs/" -> "logs/", "a/b" -> "a/b/",
    "/" -> "".
    """
    prefix = (raw or "").strip("/")
    if prefix:
        prefix += "/"
    return prefix


def check_in_scope(entry: ObjectVersionRef, prefix: str):
    """
    Raise ScopeViolationError if entry's key lies outside prefix.

    An empty prefix covers the whole bucket.
    """
    if prefix and not entry.key.startswith(prefix):
        raise ScopeViolationError(entry.key, prefix)


class BatchAccumulator:
    """Collects entries and seals a batch each time `capacity` is reached."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"batch capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._open: List[ObjectVersionRef] = []

    def __len__(self) -> int:
        return len(self._open)

    def observe(self, entry: ObjectVersionRef) -> Optional[Batch]:
        """Add entry; return the sealed batch when it fills, else None."""
        self._open.append(entry)
        if len(self._open) < self.capacity:
            return None

        sealed = tuple(self._open)
        self._open = []
        return sealed

    def flush(self) -> Optional[Batch]:
        """Return the partially filled batch, or None if it is empty."""
        if not self._open:
            return None

        sealed = tuple(self._open)
        self._open = []
        return sealed
