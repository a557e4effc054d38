"""
S3 Prefix Purge - Error Types

Every fatal condition of a purge run surfaces as a PurgeError subclass.
Per-item delete failures are not errors here; they are only counted.
"""


class PurgeError(Exception):
    """Base class for fatal purge failures."""


class ConfigurationError(PurgeError):
    """Invalid settings or unusable credentials, raised before listing starts."""


class ListingError(PurgeError):
    """Paging through the object versions failed."""


class ScopeViolationError(PurgeError):
    """The listing returned a key outside the requested prefix."""

    def __init__(self, key: str, prefix: str):
        self.key = key
        self.prefix = prefix
        super().__init__(
            f"encountered object without requested prefix {prefix!r}: {key}"
        )


class DeleteRequestError(PurgeError):
    """A DeleteObjects request could not be completed."""
