"""Submit restore requests for every object in a restore plan."""

from __future__ import annotations

import logging
from functools import partial
from threading import Event

from botocore.exceptions import BotoCoreError, ClientError

from . import config
from .classifier import restore_tier_for
from .models import ObjectRecord, ObjectSubmission, RestorePlan, SubmissionOutcome, SubmissionStatus
from .worker_pool import ProgressCallback, run_bounded

_TIERS_BY_NAME = {tier.lower(): tier for tier in config.VALID_RESTORE_TIERS}


def normalize_restore_tier(tier: str) -> str:
    """Map a case-insensitive tier name (e.g. "BULK") onto the S3 spelling."""
    try:
        return _TIERS_BY_NAME[tier.strip().lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown restore tier {tier!r}; expected one of {', '.join(config.VALID_RESTORE_TIERS)}"
        ) from exc


def _describe_client_error(exc: ClientError) -> tuple[str, str]:
    error = exc.response.get("Error", {})
    code = error.get("Code", "Unknown")
    message = error.get("Message") or str(exc)
    return code, f"{code}: {message}"


def _log_progress(processed: int, total: int) -> None:
    logging.info("Processed %d/%d restore request(s)", processed, total)


class RestoreSubmitter:  # pylint: disable=too-few-public-methods
    """Issues one restore_object call per planned object.

    A failed request is recorded and the remaining objects are still
    processed. Nothing is retried; run the restore again to retry failures.
    """

    def __init__(
        self,
        s3,
        *,
        max_workers: int = config.MAX_WORKERS,
        cancel_event: Event | None = None,
        on_progress: ProgressCallback | None = _log_progress,
        progress_every: int = config.PROGRESS_EVERY,
    ):
        self.s3 = s3
        self.max_workers = max_workers
        self.cancel_event = cancel_event
        self.on_progress = on_progress
        self.progress_every = progress_every

    def request_restore(self, bucket: str, record: ObjectRecord, tier: str, retention_days: int) -> ObjectSubmission:
        """Request restore for a single object"""
        restore_tier = restore_tier_for(record.storage_tier, tier)
        try:
            self.s3.restore_object(
                Bucket=bucket,
                Key=record.key,
                RestoreRequest={
                    "Days": retention_days,
                    "GlacierJobParameters": {"Tier": restore_tier},
                },
            )
        except ClientError as exc:
            code, detail = _describe_client_error(exc)
            if code == "RestoreAlreadyInProgress":
                logging.debug("Restore already in progress: %s/%s", bucket, record.key)
                return ObjectSubmission(record.key, record.size_bytes, SubmissionStatus.ALREADY_IN_PROGRESS)
            logging.warning("Restore request failed for %s/%s: %s", bucket, record.key, detail)
            return ObjectSubmission(record.key, record.size_bytes, SubmissionStatus.FAILED, detail)
        except BotoCoreError as exc:
            logging.warning("Restore request failed for %s/%s: %s", bucket, record.key, exc)
            return ObjectSubmission(record.key, record.size_bytes, SubmissionStatus.FAILED, str(exc))

        logging.debug("Restore requested: %s/%s (tier: %s)", bucket, record.key, restore_tier)
        return ObjectSubmission(record.key, record.size_bytes, SubmissionStatus.REQUESTED)

    def submit(
        self,
        plan: RestorePlan,
        tier: str = config.GLACIER_RESTORE_TIER,
        retention_days: int = config.GLACIER_RESTORE_DAYS,
    ) -> SubmissionOutcome:
        """
        Request restores for every object in the plan, in plan order.

        Args:
            plan: Restore plan from RestorePlanner
            tier: Retrieval tier (Bulk, Standard or Expedited; any case)
            retention_days: Days the restored copy stays available

        Returns:
            SubmissionOutcome covering every processed object

        Raises:
            ValueError: If tier or retention_days is invalid (before any request)
        """
        restore_tier = normalize_restore_tier(tier)
        if retention_days < 1:
            raise ValueError("retention_days must be at least 1")
        if plan.is_empty:
            return SubmissionOutcome(bucket=plan.bucket)

        logging.info(
            "Requesting %s restores for %d object(s) in %s (%d day(s))",
            restore_tier,
            plan.object_count,
            plan.bucket,
            retention_days,
        )
        run = run_bounded(
            plan.objects,
            partial(self._request_one, plan.bucket, restore_tier, retention_days),
            max_workers=self.max_workers,
            cancel_event=self.cancel_event,
            on_progress=self.on_progress,
            progress_every=self.progress_every,
        )
        results = []
        for task in run.results:
            if task.error is not None:
                record = task.item
                logging.error("Unexpected error restoring %s/%s: %r", plan.bucket, record.key, task.error)
                results.append(
                    ObjectSubmission(record.key, record.size_bytes, SubmissionStatus.FAILED, repr(task.error))
                )
            else:
                results.append(task.value)
        return SubmissionOutcome(
            bucket=plan.bucket,
            results=tuple(results),
            total_bytes_attempted=sum(result.size_bytes for result in results),
            cancelled=run.cancelled,
        )

    def _request_one(self, bucket: str, tier: str, retention_days: int, record: ObjectRecord) -> ObjectSubmission:
        return self.request_restore(bucket, record, tier, retention_days)
