"""Unit tests for ObjectEnumerator and BucketLister"""

from datetime import datetime, timezone
from unittest import mock

import pytest
from botocore.exceptions import EndpointConnectionError

from glacier_restore.enumerator import BucketLister, ObjectEnumerator
from glacier_restore.exceptions import ListingFailed
from glacier_restore.models import StorageTier
from tests.assertions import assert_equal, assert_keys
from tests.glacier_test_utils import client_error, make_entry, make_page, paginate

ENTRIES = [
    make_entry("a.txt", 100),
    make_entry("b.txt", 200, "STANDARD"),
    make_entry("c.txt", 300, "DEEP_ARCHIVE"),
    make_entry("d.txt", 400, None),
    make_entry("e.txt", 500, "GLACIER_IR"),
]


class TestEnumerateObjects:
    """Tests for ObjectEnumerator.enumerate_objects"""

    def test_single_page(self, enumerator, s3_mock):
        """A single page without a token is the whole listing"""
        s3_mock.list_objects_v2.return_value = make_page(ENTRIES[:2])

        records = list(enumerator.enumerate_objects("test-bucket"))

        assert_keys(records, ["a.txt", "b.txt"])
        s3_mock.list_objects_v2.assert_called_once_with(Bucket="test-bucket")

    def test_normalizes_entries(self, enumerator, s3_mock):
        """Entries become ObjectRecords with classified tiers"""
        s3_mock.list_objects_v2.return_value = make_page(ENTRIES)

        records = list(enumerator.enumerate_objects("test-bucket"))

        assert_equal(
            [record.storage_tier for record in records],
            [
                StorageTier.ARCHIVAL_DELAYED,
                StorageTier.STANDARD,
                StorageTier.ARCHIVAL_DEEP,
                StorageTier.STANDARD,
                StorageTier.ARCHIVAL_INSTANT,
            ],
        )
        assert records[0].size_bytes == 100
        assert records[0].last_modified == datetime(2023, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert records[3].storage_class == "STANDARD"

    def test_follows_continuation_tokens(self, enumerator, s3_mock):
        """Pages are fetched with the previous page's token and concatenated in order"""
        s3_mock.list_objects_v2.side_effect = paginate(ENTRIES, [2, 2, 1])

        records = list(enumerator.enumerate_objects("test-bucket"))

        assert_keys(records, ["a.txt", "b.txt", "c.txt", "d.txt", "e.txt"])
        assert s3_mock.list_objects_v2.call_args_list == [
            mock.call(Bucket="test-bucket"),
            mock.call(Bucket="test-bucket", ContinuationToken="t1"),
            mock.call(Bucket="test-bucket", ContinuationToken="t2"),
        ]

    @pytest.mark.parametrize("page_sizes", [[5], [1, 1, 1, 1, 1], [3, 2], [0, 5], [2, 0, 3, 0]])
    def test_page_boundaries_do_not_change_result(self, s3_mock, page_sizes):
        """Re-paginating the same dataset yields the same flat sequence"""
        s3_mock.list_objects_v2.side_effect = paginate(ENTRIES, page_sizes)

        records = list(ObjectEnumerator(s3_mock).enumerate_objects("test-bucket"))

        assert_keys(records, [entry["Key"] for entry in ENTRIES])

    def test_empty_bucket_yields_nothing(self, enumerator, s3_mock):
        """A bucket with zero objects is not an error"""
        s3_mock.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}

        assert list(enumerator.enumerate_objects("empty-bucket")) == []

    def test_is_lazy(self, enumerator, s3_mock):
        """No request is made until the sequence is consumed"""
        s3_mock.list_objects_v2.return_value = make_page(ENTRIES)

        iterator = enumerator.enumerate_objects("test-bucket")

        s3_mock.list_objects_v2.assert_not_called()
        next(iterator)
        s3_mock.list_objects_v2.assert_called_once()

    def test_restartable(self, enumerator, s3_mock):
        """A fresh call re-queries from the first page"""
        s3_mock.list_objects_v2.return_value = make_page(ENTRIES[:1])

        first = list(enumerator.enumerate_objects("test-bucket"))
        second = list(enumerator.enumerate_objects("test-bucket"))

        assert first == second
        assert_equal(s3_mock.list_objects_v2.call_count, 2)

    def test_page_size_sets_max_keys(self, s3_mock):
        """page_size is passed through as MaxKeys"""
        s3_mock.list_objects_v2.return_value = make_page([])

        list(ObjectEnumerator(s3_mock, page_size=50).enumerate_objects("test-bucket"))

        s3_mock.list_objects_v2.assert_called_once_with(Bucket="test-bucket", MaxKeys=50)

    def test_failure_mid_pagination_raises_listing_failed(self, enumerator, s3_mock):
        """A failed page aborts the whole enumeration"""
        error = client_error("AccessDenied", "denied", "ListObjectsV2")
        s3_mock.list_objects_v2.side_effect = [make_page(ENTRIES[:2], "t1"), error]

        with pytest.raises(ListingFailed) as exc_info:
            list(enumerator.enumerate_objects("test-bucket"))

        assert exc_info.value.bucket == "test-bucket"
        assert exc_info.value.cause is error
        assert "test-bucket" in str(exc_info.value)
        assert "AccessDenied" in str(exc_info.value)

    def test_connection_error_raises_listing_failed(self, enumerator, s3_mock):
        """botocore connection errors are listing failures too"""
        s3_mock.list_objects_v2.side_effect = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")

        with pytest.raises(ListingFailed):
            list(enumerator.enumerate_objects("test-bucket"))

    def test_missing_contents_with_key_count_raises(self, enumerator, s3_mock):
        """A page claiming keys but carrying no Contents is malformed"""
        s3_mock.list_objects_v2.return_value = {"KeyCount": 3}

        with pytest.raises(ListingFailed, match="missing Contents"):
            list(enumerator.enumerate_objects("test-bucket"))

    def test_repeated_continuation_token_raises(self, enumerator, s3_mock):
        """A token echoed back by the service would loop forever"""
        s3_mock.list_objects_v2.side_effect = [make_page(ENTRIES[:1], "t1"), make_page(ENTRIES[1:2], "t1")]

        with pytest.raises(ListingFailed, match="repeated"):
            list(enumerator.enumerate_objects("test-bucket"))

        assert_equal(s3_mock.list_objects_v2.call_count, 2)


class TestBucketLister:
    """Tests for BucketLister.list_buckets"""

    @staticmethod
    def _buckets_response():
        return {
            "Buckets": [
                {"Name": "small", "CreationDate": datetime(2020, 1, 1, tzinfo=timezone.utc)},
                {"Name": "large", "CreationDate": datetime(2021, 1, 1, tzinfo=timezone.utc)},
                {"Name": "broken", "CreationDate": datetime(2022, 1, 1, tzinfo=timezone.utc)},
            ]
        }

    @staticmethod
    def _list_objects(Bucket, **_kwargs):  # pylint: disable=invalid-name
        if Bucket == "broken":
            raise client_error("AccessDenied", "denied", "ListObjectsV2")
        if Bucket == "large":
            return make_page([make_entry("x", 1000), make_entry("y", 24)])
        return make_page([make_entry("z", 10)])

    def test_lists_buckets_sorted_by_size(self, s3_mock, enumerator):
        """Buckets are sized and sorted largest first; unreadable ones keep size 0"""
        s3_mock.list_buckets.return_value = self._buckets_response()
        s3_mock.list_objects_v2.side_effect = self._list_objects

        with mock.patch("glacier_restore.enumerator.logging.warning") as mock_warning:
            buckets = BucketLister(s3_mock, enumerator).list_buckets()

        assert_equal([bucket.name for bucket in buckets], ["large", "small", "broken"])
        assert_equal(buckets[0].size_bytes, 1024)
        assert_equal(buckets[0].object_count, 2)
        assert buckets[2].size_known is False
        assert buckets[2].size_bytes == 0
        mock_warning.assert_called_once()

    def test_excluded_buckets_are_skipped(self, s3_mock, enumerator):
        """Configured exclusions are never listed"""
        s3_mock.list_buckets.return_value = self._buckets_response()
        s3_mock.list_objects_v2.side_effect = self._list_objects

        buckets = BucketLister(s3_mock, enumerator, excluded=["broken", "small"]).list_buckets()

        assert_equal([bucket.name for bucket in buckets], ["large"])

    def test_list_buckets_failure_raises(self, s3_mock, enumerator):
        """Failure to list buckets is fatal"""
        s3_mock.list_buckets.side_effect = client_error("InvalidAccessKeyId", "bad key", "ListBuckets")

        with pytest.raises(ListingFailed) as exc_info:
            BucketLister(s3_mock, enumerator).list_buckets()

        assert exc_info.value.bucket is None
        assert "Failed to list buckets" in str(exc_info.value)
