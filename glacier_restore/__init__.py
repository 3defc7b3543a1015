"""
Glacier restore orchestration package.

Enumerate a bucket, plan restores of its archived objects, submit restore
requests and track their progress.
"""

from .classifier import classify, is_archival
from .commands import RestoreEngine, RestoreRun
from .enumerator import BucketLister, ObjectEnumerator
from .exceptions import ConfigurationError, ListingFailed
from .models import (
    BucketSummary,
    ObjectRecord,
    ObjectStatus,
    ObjectSubmission,
    RestoreMarker,
    RestorePlan,
    RestoreState,
    StatusSummary,
    StorageTier,
    SubmissionOutcome,
    SubmissionStatus,
    TierUsage,
)
from .planner import RestorePlanner, build_plan
from .restore_marker import parse_restore_marker
from .status import StatusAggregator
from .submitter import RestoreSubmitter

__all__ = [
    "BucketLister",
    "BucketSummary",
    "ConfigurationError",
    "ListingFailed",
    "ObjectEnumerator",
    "ObjectRecord",
    "ObjectStatus",
    "ObjectSubmission",
    "RestoreEngine",
    "RestoreMarker",
    "RestorePlan",
    "RestorePlanner",
    "RestoreRun",
    "RestoreState",
    "RestoreSubmitter",
    "StatusAggregator",
    "StatusSummary",
    "StorageTier",
    "SubmissionOutcome",
    "SubmissionStatus",
    "TierUsage",
    "build_plan",
    "classify",
    "is_archival",
    "parse_restore_marker",
]
