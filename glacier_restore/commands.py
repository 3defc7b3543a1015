"""Command-level entry points for list, dry-run, restore and status.

Each command returns a structured result; rendering happens in reporting.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import Event
from typing import Callable, Iterable

from . import config
from .enumerator import BucketLister, ObjectEnumerator
from .models import BucketSummary, RestorePlan, StatusSummary, SubmissionOutcome
from .planner import RestorePlanner
from .status import StatusAggregator
from .submitter import RestoreSubmitter, normalize_restore_tier


@dataclass(frozen=True)
class RestoreRun:
    """Plan plus submission outcome; outcome is None when nothing was submitted."""

    plan: RestorePlan
    outcome: SubmissionOutcome | None = None


class RestoreEngine:
    """Wires the enumerator, planner, submitter and aggregator to one S3 client."""

    def __init__(
        self,
        s3,
        *,
        max_workers: int = config.MAX_WORKERS,
        cancel_event: Event | None = None,
        excluded_buckets: Iterable[str] = config.EXCLUDED_BUCKETS,
        progress_every: int = config.PROGRESS_EVERY,
    ):
        self.s3 = s3
        self.cancel_event = cancel_event if cancel_event is not None else Event()
        self.enumerator = ObjectEnumerator(s3)
        self.bucket_lister = BucketLister(s3, self.enumerator, excluded=excluded_buckets)
        self.planner = RestorePlanner(self.enumerator)
        self.submitter = RestoreSubmitter(
            s3, max_workers=max_workers, cancel_event=self.cancel_event, progress_every=progress_every
        )
        self.aggregator = StatusAggregator(
            s3, self.enumerator, max_workers=max_workers, cancel_event=self.cancel_event, progress_every=progress_every
        )

    def run_list(self) -> list[BucketSummary]:
        """List all buckets with their sizes"""
        return self.bucket_lister.list_buckets()

    def run_dry_run(self, bucket: str) -> RestorePlan:
        """Compute the restore plan without requesting anything"""
        return self.planner.plan(bucket)

    def run_restore(
        self,
        bucket: str,
        tier: str = config.GLACIER_RESTORE_TIER,
        retention_days: int = config.GLACIER_RESTORE_DAYS,
        confirm: Callable[[RestorePlan], bool] | None = None,
    ) -> RestoreRun:
        """
        Plan and then submit restores for a bucket.

        Args:
            bucket: Bucket name
            tier: Retrieval tier
            retention_days: Days to keep restored copies
            confirm: Optional callback shown the plan; returning False skips submission

        Raises:
            ValueError: If tier or retention_days is invalid
            ListingFailed: If the bucket listing fails
        """
        normalize_restore_tier(tier)
        if retention_days < 1:
            raise ValueError("retention_days must be at least 1")
        plan = self.planner.plan(bucket)
        if plan.is_empty:
            return RestoreRun(plan=plan)
        if confirm is not None and not confirm(plan):
            return RestoreRun(plan=plan)
        return RestoreRun(plan=plan, outcome=self.submitter.submit(plan, tier, retention_days))

    def run_status(self, bucket: str) -> StatusSummary:
        """Aggregate restore status for a bucket"""
        return self.aggregator.aggregate(bucket)
