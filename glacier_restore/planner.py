"""Dry-run restore planning: which archived objects a restore would touch."""

from __future__ import annotations

from typing import Iterable

from .classifier import is_archival
from .enumerator import ObjectEnumerator
from .models import ObjectRecord, RestorePlan, StorageTier, TierUsage


def summarize_tiers(records: Iterable[ObjectRecord]) -> dict[StorageTier, TierUsage]:
    """Count objects and bytes per storage tier."""
    counts: dict[StorageTier, int] = {}
    sizes: dict[StorageTier, int] = {}
    for record in records:
        counts[record.storage_tier] = counts.get(record.storage_tier, 0) + 1
        sizes[record.storage_tier] = sizes.get(record.storage_tier, 0) + record.size_bytes
    return {tier: TierUsage(object_count=counts[tier], total_bytes=sizes[tier]) for tier in counts}


def build_plan(bucket: str, records: Iterable[ObjectRecord]) -> RestorePlan:
    """
    Build a restore plan from an enumerated object set.

    Archived objects are ordered largest first; equal sizes are ordered by
    key so the plan is deterministic.
    """
    records = list(records)
    archived = sorted(
        (record for record in records if is_archival(record.storage_tier)),
        key=lambda record: (-record.size_bytes, record.key),
    )
    return RestorePlan(
        bucket=bucket,
        objects=tuple(archived),
        total_bytes=sum(record.size_bytes for record in archived),
        tier_distribution=summarize_tiers(records),
    )


class RestorePlanner:  # pylint: disable=too-few-public-methods
    """Computes restore plans without touching any object."""

    def __init__(self, enumerator: ObjectEnumerator):
        self.enumerator = enumerator

    def plan(self, bucket: str) -> RestorePlan:
        """Enumerate the bucket and return its restore plan.

        Raises:
            ListingFailed: If the bucket listing fails
        """
        return build_plan(bucket, self.enumerator.enumerate_objects(bucket))
