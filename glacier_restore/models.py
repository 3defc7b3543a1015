"""Request-scoped value types shared by the restore engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class StorageTier(Enum):
    """Normalized storage tiers"""

    STANDARD = "standard"
    ARCHIVAL_INSTANT = "archival_instant"
    ARCHIVAL_DELAYED = "archival_delayed"
    ARCHIVAL_DEEP = "archival_deep"
    UNKNOWN = "unknown"


class RestoreState(Enum):
    """Restore progress of a single archived object"""

    NOT_REQUESTED = "not_requested"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SubmissionStatus(Enum):
    """Result of one restore_object call"""

    REQUESTED = "requested"
    ALREADY_IN_PROGRESS = "already_in_progress"
    FAILED = "failed"


@dataclass(frozen=True)
class ObjectRecord:
    """Snapshot of one object as reported by a bucket listing."""

    key: str
    size_bytes: int
    storage_tier: StorageTier
    last_modified: datetime | None = None
    storage_class: str = "STANDARD"


@dataclass(frozen=True)
class TierUsage:
    object_count: int = 0
    total_bytes: int = 0


@dataclass(frozen=True)
class RestorePlan:
    """Archived objects of a bucket, largest first.

    ``tier_distribution`` covers every enumerated object, not only the
    archived ones, and is diagnostic output for dry runs.
    """

    bucket: str
    objects: tuple[ObjectRecord, ...] = ()
    total_bytes: int = 0
    tier_distribution: dict[StorageTier, TierUsage] = field(default_factory=dict, compare=False)

    @property
    def object_count(self) -> int:
        return len(self.objects)

    @property
    def is_empty(self) -> bool:
        return not self.objects


@dataclass(frozen=True)
class ObjectSubmission:
    key: str
    size_bytes: int
    status: SubmissionStatus
    error_detail: str | None = None

    @property
    def succeeded(self) -> bool:
        """Already-in-progress restores count as succeeded."""
        return self.status is not SubmissionStatus.FAILED


@dataclass(frozen=True)
class SubmissionOutcome:
    """Per-object results of a restore submission, in plan order."""

    bucket: str
    results: tuple[ObjectSubmission, ...] = ()
    total_bytes_attempted: int = 0
    cancelled: bool = False

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failure_count(self) -> int:
        return sum(1 for result in self.results if not result.succeeded)

    @property
    def already_in_progress_count(self) -> int:
        return sum(1 for result in self.results if result.status is SubmissionStatus.ALREADY_IN_PROGRESS)

    @property
    def failures(self) -> tuple[ObjectSubmission, ...]:
        return tuple(result for result in self.results if not result.succeeded)


@dataclass(frozen=True)
class RestoreMarker:
    """Parsed form of the S3 ``Restore`` header.

    ``expiry`` is only meaningful for COMPLETED and is None when S3 did not
    send a readable expiry-date.
    """

    state: RestoreState
    expiry: datetime | None = None


@dataclass(frozen=True)
class ObjectStatus:
    key: str
    size_bytes: int
    storage_tier: StorageTier
    state: RestoreState
    expiry: datetime | None = None
    error_detail: str | None = None

    @property
    def degraded(self) -> bool:
        """True when metadata could not be fetched and this is a placeholder."""
        return self.error_detail is not None


def _total_size(statuses: tuple[ObjectStatus, ...]) -> int:
    return sum(status.size_bytes for status in statuses)


@dataclass(frozen=True)
class StatusSummary:
    """Archived objects of a bucket split by restore state.

    Every archived object lands in exactly one of the three groups, so
    ``total_archival_bytes`` is the sum of the three group sizes. Objects
    whose metadata could not be read sit in ``not_requested`` with size 0.
    """

    bucket: str
    in_progress: tuple[ObjectStatus, ...] = ()
    completed: tuple[ObjectStatus, ...] = ()
    not_requested: tuple[ObjectStatus, ...] = ()
    cancelled: bool = False

    @property
    def in_progress_bytes(self) -> int:
        return _total_size(self.in_progress)

    @property
    def completed_bytes(self) -> int:
        return _total_size(self.completed)

    @property
    def not_requested_bytes(self) -> int:
        return _total_size(self.not_requested)

    @property
    def total_archival_bytes(self) -> int:
        return self.in_progress_bytes + self.completed_bytes + self.not_requested_bytes

    @property
    def object_count(self) -> int:
        return len(self.in_progress) + len(self.completed) + len(self.not_requested)

    @property
    def degraded(self) -> tuple[ObjectStatus, ...]:
        return tuple(status for status in self.not_requested if status.degraded)


@dataclass(frozen=True)
class BucketSummary:
    """Bucket entry for the ``list`` command."""

    name: str
    creation_date: datetime | None
    size_bytes: int = 0
    object_count: int = 0
    size_known: bool = True
