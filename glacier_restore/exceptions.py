"""Error types raised by the glacier restore engine."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when credentials or client settings are missing or invalid."""


class ListingFailed(RuntimeError):
    """Raised when a bucket (or the bucket list) cannot be enumerated.

    Enumeration is all-or-nothing: a failure on any page aborts the listing.
    """

    def __init__(self, bucket: str | None, cause: object):
        self.bucket = bucket
        self.cause = cause
        if bucket is None:
            message = f"Failed to list buckets: {cause}"
        else:
            message = f"Failed to list objects in bucket {bucket}: {cause}"
        super().__init__(message)
