"""Map S3 storage class strings onto normalized storage tiers."""

from __future__ import annotations

from .models import StorageTier

# Storage classes that live in an archival tier. Everything else S3 reports
# (STANDARD, STANDARD_IA, ONEZONE_IA, INTELLIGENT_TIERING, REDUCED_REDUNDANCY,
# EXPRESS_ONEZONE, OUTPOSTS, ...) is readable directly.
_ARCHIVAL_CLASSES = {
    "GLACIER_IR": StorageTier.ARCHIVAL_INSTANT,
    "GLACIER": StorageTier.ARCHIVAL_DELAYED,
    "DEEP_ARCHIVE": StorageTier.ARCHIVAL_DEEP,
}

ARCHIVAL_TIERS = frozenset(_ARCHIVAL_CLASSES.values())


def classify(storage_class: str | None) -> StorageTier:
    """Return the tier for an S3 storage class.

    S3 omits StorageClass for STANDARD objects, so None and "" are STANDARD.
    Unrecognized names are treated as STANDARD as well; UNKNOWN is reserved
    for objects whose metadata could not be read at all.
    """
    if not storage_class:
        return StorageTier.STANDARD
    return _ARCHIVAL_CLASSES.get(storage_class.strip().upper(), StorageTier.STANDARD)


def is_archival(tier: StorageTier) -> bool:
    """Check if a tier needs a restore before its data can be read"""
    return tier in ARCHIVAL_TIERS


def restore_tier_for(tier: StorageTier, requested: str) -> str:
    """Return the retrieval tier S3 will accept for an object.

    Deep Archive only supports Standard or Bulk retrievals.
    """
    if tier is StorageTier.ARCHIVAL_DEEP and requested == "Expedited":
        return "Standard"
    return requested
