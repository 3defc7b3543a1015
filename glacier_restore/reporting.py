"""
Console rendering for command results.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from .models import BucketSummary, ObjectStatus, RestorePlan, StatusSummary, StorageTier, SubmissionOutcome

BANNER_WIDTH = 70
# Number of individual failures / objects listed before truncating
MAX_LISTED = 20

_TIER_LABELS = {
    StorageTier.STANDARD: "Standard",
    StorageTier.ARCHIVAL_INSTANT: "Glacier Instant Retrieval",
    StorageTier.ARCHIVAL_DELAYED: "Glacier Flexible Retrieval",
    StorageTier.ARCHIVAL_DEEP: "Glacier Deep Archive",
    StorageTier.UNKNOWN: "Unknown",
}


def format_bytes(num_bytes: int | None, decimal_places: int = 2) -> str:
    """
    Format byte count using binary units.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.50 KiB'
        >>> format_bytes(None)
        'n/a'
    """
    if num_bytes is None:
        return "n/a"
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = float(num_bytes)
    for unit in ("KiB", "MiB", "GiB", "TiB"):
        value /= 1024
        if value < 1024:
            return f"{value:.{decimal_places}f} {unit}"
    return f"{value / 1024:.{decimal_places}f} PiB"


def format_date(value: datetime | None) -> str:
    if value is None:
        return "unknown"
    return value.strftime("%Y-%m-%d %H:%M %Z").strip()


def _print_banner(title: str) -> None:
    print("=" * BANNER_WIDTH)
    print(title)
    print("=" * BANNER_WIDTH)


def print_bucket_table(buckets: Sequence[BucketSummary]) -> None:
    """Print buckets with sizes and creation dates."""
    _print_banner("S3 BUCKETS AND SIZES")
    print(f"{'Bucket Name':<40} {'Size':>14} {'Objects':>10}  Created")
    print("-" * BANNER_WIDTH)
    for bucket in buckets:
        size = format_bytes(bucket.size_bytes) if bucket.size_known else "unavailable"
        created = bucket.creation_date.strftime("%Y-%m-%d") if bucket.creation_date else "unknown"
        print(f"{bucket.name:<40} {size:>14} {bucket.object_count:>10,}  {created}")
    print("-" * BANNER_WIDTH)
    total = sum(bucket.size_bytes for bucket in buckets)
    print(f"Total storage across all buckets: {format_bytes(total)}")
    print(f"Number of buckets: {len(buckets)}")


def print_plan(plan: RestorePlan) -> None:
    """Print tier distribution and the objects a restore would request."""
    _print_banner(f"RESTORE PLAN: {plan.bucket}")
    print("Storage tier distribution:")
    if not plan.tier_distribution:
        print("  (bucket is empty)")
    for tier, usage in sorted(plan.tier_distribution.items(), key=lambda item: -item[1].total_bytes):
        print(f"  {_TIER_LABELS[tier]:<28} {usage.object_count:>10,} object(s)  {format_bytes(usage.total_bytes):>12}")
    print()
    if plan.is_empty:
        print("✓ No archived objects need restore")
        return
    print(f"Objects to restore: {plan.object_count:,} ({format_bytes(plan.total_bytes)})")
    for record in plan.objects[:MAX_LISTED]:
        print(f"  {format_bytes(record.size_bytes):>12}  {record.storage_class:<13} {record.key}")
    if plan.object_count > MAX_LISTED:
        print(f"  ... and {plan.object_count - MAX_LISTED:,} more")


def print_submission_outcome(outcome: SubmissionOutcome) -> None:
    """Print restore submission totals and failed keys."""
    print()
    _print_banner(f"RESTORE REQUESTS: {outcome.bucket}")
    print(f"  Requested:           {outcome.success_count - outcome.already_in_progress_count:,}")
    print(f"  Already in progress: {outcome.already_in_progress_count:,}")
    print(f"  Failed:              {outcome.failure_count:,}")
    print(f"  Bytes attempted:     {format_bytes(outcome.total_bytes_attempted)}")
    if outcome.cancelled:
        print("  ⚠️  Interrupted: remaining objects were not requested")
    failures = outcome.failures
    if failures:
        print()
        print("Failed objects (run restore again to retry):")
        for failure in failures[:MAX_LISTED]:
            print(f"  ✗ {failure.key}: {failure.error_detail}")
        if len(failures) > MAX_LISTED:
            print(f"  ... and {len(failures) - MAX_LISTED:,} more")


def _print_status_group(title: str, statuses: Sequence[ObjectStatus], total_bytes: int, show_expiry: bool) -> None:
    print(f"{title}: {len(statuses):,} object(s), {format_bytes(total_bytes)}")
    for status in statuses[:MAX_LISTED]:
        suffix = f"  (expires {format_date(status.expiry)})" if show_expiry else ""
        print(f"  {format_bytes(status.size_bytes):>12}  {status.key}{suffix}")
    if len(statuses) > MAX_LISTED:
        print(f"  ... and {len(statuses) - MAX_LISTED:,} more")


def print_status_summary(summary: StatusSummary) -> None:
    """Print restore status groups with their byte totals."""
    _print_banner(f"RESTORE STATUS: {summary.bucket}")
    if summary.object_count == 0:
        if summary.cancelled:
            print("⚠️  Interrupted before any object was checked")
        else:
            print("✓ No archived objects in this bucket")
        return
    _print_status_group("Completed", summary.completed, summary.completed_bytes, show_expiry=True)
    _print_status_group("In progress", summary.in_progress, summary.in_progress_bytes, show_expiry=False)
    _print_status_group("Not requested", summary.not_requested, summary.not_requested_bytes, show_expiry=False)
    print()
    print(f"Total archived: {summary.object_count:,} object(s), {format_bytes(summary.total_archival_bytes)}")
    degraded = summary.degraded
    if degraded:
        print(f"⚠️  Metadata unavailable for {len(degraded):,} object(s); counted as not requested")
    if summary.cancelled:
        print("⚠️  Interrupted: only objects checked before the interrupt are included")
