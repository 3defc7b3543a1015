"""Paginated listing of buckets and bucket contents."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from botocore.exceptions import BotoCoreError, ClientError

from .classifier import classify
from .exceptions import ListingFailed
from .models import BucketSummary, ObjectRecord


def _get_page_contents(bucket: str, page: dict) -> list[dict]:
    """Extract object listings from a list_objects_v2 page, validating key counts."""
    contents = page.get("Contents")
    key_count = page.get("KeyCount")
    if contents is None:
        if key_count not in (None, 0):
            raise ListingFailed(
                bucket,
                f"list_objects_v2 missing Contents while reporting {key_count} keys",
            )
        return []
    return contents


def _to_record(entry: dict) -> ObjectRecord:
    storage_class = entry.get("StorageClass") or "STANDARD"
    return ObjectRecord(
        key=entry["Key"],
        size_bytes=int(entry.get("Size", 0)),
        storage_tier=classify(storage_class),
        last_modified=entry.get("LastModified"),
        storage_class=storage_class,
    )


class ObjectEnumerator:  # pylint: disable=too-few-public-methods
    """Lists every object of a bucket by following continuation tokens."""

    def __init__(self, s3, page_size: int | None = None):
        self.s3 = s3
        self.page_size = page_size

    def _fetch_page(self, bucket: str, token: str | None) -> dict:
        kwargs: dict = {"Bucket": bucket}
        if token:
            kwargs["ContinuationToken"] = token
        if self.page_size:
            kwargs["MaxKeys"] = self.page_size
        try:
            return self.s3.list_objects_v2(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise ListingFailed(bucket, exc) from exc

    def enumerate_objects(self, bucket: str) -> Iterator[ObjectRecord]:
        """
        Yield every object in the bucket, in the order S3 returns them.

        Each call starts a fresh listing. There is no resume: a failed page
        aborts the whole enumeration.

        Raises:
            ListingFailed: If any page cannot be fetched or is malformed
        """
        token = None
        pages = 0
        while True:
            page = self._fetch_page(bucket, token)
            pages += 1
            for entry in _get_page_contents(bucket, page):
                yield _to_record(entry)
            next_token = page.get("NextContinuationToken")
            if not next_token:
                break
            if next_token == token:
                raise ListingFailed(bucket, f"continuation token {next_token!r} repeated")
            token = next_token
        logging.debug("Listed %s in %d page(s)", bucket, pages)


class BucketLister:  # pylint: disable=too-few-public-methods
    """Lists the account's buckets together with their total object size."""

    def __init__(self, s3, enumerator: ObjectEnumerator, excluded: Iterable[str] = ()):
        self.s3 = s3
        self.enumerator = enumerator
        self.excluded = set(excluded)

    def _size_bucket(self, name: str, creation_date) -> BucketSummary:
        size = 0
        count = 0
        try:
            for record in self.enumerator.enumerate_objects(name):
                size += record.size_bytes
                count += 1
        except ListingFailed as exc:
            logging.warning("Could not get size for bucket %s: %s", name, exc.cause)
            return BucketSummary(name=name, creation_date=creation_date, size_known=False)
        return BucketSummary(name=name, creation_date=creation_date, size_bytes=size, object_count=count)

    def list_buckets(self) -> list[BucketSummary]:
        """
        Return all buckets, largest first.

        A bucket whose contents can't be listed is kept with size 0 and
        size_known=False.

        Raises:
            ListingFailed: If the bucket list itself can't be fetched
        """
        try:
            response = self.s3.list_buckets()
        except (ClientError, BotoCoreError) as exc:
            raise ListingFailed(None, exc) from exc

        buckets = [b for b in response.get("Buckets", []) if b["Name"] not in self.excluded]
        logging.info("Found %d bucket(s). Calculating sizes...", len(buckets))
        summaries = []
        for bucket in buckets:
            logging.debug("Getting size for bucket: %s", bucket["Name"])
            summaries.append(self._size_bucket(bucket["Name"], bucket.get("CreationDate")))
        summaries.sort(key=lambda summary: (-summary.size_bytes, summary.name))
        return summaries
