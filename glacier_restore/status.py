"""Aggregate the restore state of a bucket's archived objects."""

from __future__ import annotations

import logging
from functools import partial
from threading import Event
from typing import Iterable

from botocore.exceptions import BotoCoreError, ClientError

from . import config
from .classifier import classify, is_archival
from .enumerator import ObjectEnumerator
from .models import ObjectRecord, ObjectStatus, RestoreState, StatusSummary, StorageTier
from .restore_marker import parse_restore_marker
from .worker_pool import ProgressCallback, run_bounded


def degraded_status(key: str, detail: str) -> ObjectStatus:
    """Placeholder for an object whose metadata could not be fetched."""
    return ObjectStatus(
        key=key,
        size_bytes=0,
        storage_tier=StorageTier.UNKNOWN,
        state=RestoreState.NOT_REQUESTED,
        error_detail=detail,
    )


def build_status_summary(bucket: str, statuses: Iterable[ObjectStatus], cancelled: bool = False) -> StatusSummary:
    """Split object statuses into the in-progress/completed/not-requested groups."""
    groups: dict[RestoreState, list[ObjectStatus]] = {state: [] for state in RestoreState}
    for status in statuses:
        groups[status.state].append(status)
    return StatusSummary(
        bucket=bucket,
        in_progress=tuple(groups[RestoreState.IN_PROGRESS]),
        completed=tuple(groups[RestoreState.COMPLETED]),
        not_requested=tuple(groups[RestoreState.NOT_REQUESTED]),
        cancelled=cancelled,
    )


def _log_progress(processed: int, total: int) -> None:
    logging.info("Checked %d/%d object(s)", processed, total)


class StatusAggregator:  # pylint: disable=too-few-public-methods
    """Reads restore metadata for every archived object in a bucket.

    S3 has no batch call for this, so each object costs one head_object.
    """

    def __init__(
        self,
        s3,
        enumerator: ObjectEnumerator,
        *,
        max_workers: int = config.MAX_WORKERS,
        cancel_event: Event | None = None,
        on_progress: ProgressCallback | None = _log_progress,
        progress_every: int = config.PROGRESS_EVERY,
    ):
        self.s3 = s3
        self.enumerator = enumerator
        self.max_workers = max_workers
        self.cancel_event = cancel_event
        self.on_progress = on_progress
        self.progress_every = progress_every

    def fetch_status(self, bucket: str, record: ObjectRecord) -> ObjectStatus:
        """Check restore status of a single object; failures yield a degraded status."""
        try:
            response = self.s3.head_object(Bucket=bucket, Key=record.key)
        except (ClientError, BotoCoreError) as exc:
            logging.warning("Status check failed for %s/%s: %s", bucket, record.key, exc)
            return degraded_status(record.key, str(exc))

        marker = parse_restore_marker(response.get("Restore"))
        if "StorageClass" in response:
            tier = classify(response["StorageClass"])
        else:
            tier = record.storage_tier
        return ObjectStatus(
            key=record.key,
            size_bytes=int(response.get("ContentLength", record.size_bytes)),
            storage_tier=tier,
            state=marker.state,
            expiry=marker.expiry,
        )

    def aggregate(self, bucket: str) -> StatusSummary:
        """
        Return the restore status of every archived object in the bucket.

        Raises:
            ListingFailed: If the bucket listing fails
        """
        archived = [record for record in self.enumerator.enumerate_objects(bucket) if is_archival(record.storage_tier)]
        if not archived:
            return StatusSummary(bucket=bucket)

        logging.info("Checking restore status of %d archived object(s) in %s", len(archived), bucket)
        run = run_bounded(
            archived,
            partial(self.fetch_status, bucket),
            max_workers=self.max_workers,
            cancel_event=self.cancel_event,
            on_progress=self.on_progress,
            progress_every=self.progress_every,
        )
        statuses = []
        for task in run.results:
            if task.error is not None:
                logging.error("Unexpected error checking %s/%s: %r", bucket, task.item.key, task.error)
                statuses.append(degraded_status(task.item.key, repr(task.error)))
            else:
                statuses.append(task.value)
        return build_status_summary(bucket, statuses, cancelled=run.cancelled)
