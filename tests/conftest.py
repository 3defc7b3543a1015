"""Shared pytest fixtures for glacier restore tests."""

from __future__ import annotations

from unittest import mock

import pytest

from glacier_restore.enumerator import ObjectEnumerator

_CREDENTIAL_VARS = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN")


@pytest.fixture(autouse=True)
def isolate_aws_credentials(monkeypatch):
    """Remove AWS credentials from the environment for the duration of a test.

    setenv before delenv so teardown restores the original value even after
    load_dotenv has written to os.environ.
    """
    for name in _CREDENTIAL_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)


@pytest.fixture
def s3_mock():
    """Mock boto3 S3 client"""
    return mock.Mock()


@pytest.fixture
def enumerator(s3_mock):
    """ObjectEnumerator bound to the mock client"""
    return ObjectEnumerator(s3_mock)
