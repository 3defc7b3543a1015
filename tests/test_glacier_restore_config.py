"""Unit tests for glacier_restore.config"""

import importlib

import pytest

from glacier_restore import config
from glacier_restore.exceptions import ConfigurationError
from tests.assertions import assert_equal

_SETTINGS_VARS = (
    "GLACIER_RESTORE_DAYS",
    "GLACIER_RESTORE_TIER",
    "GLACIER_MAX_WORKERS",
    "GLACIER_PROGRESS_EVERY",
    "GLACIER_EXCLUDED_BUCKETS",
)


@pytest.fixture(autouse=True)
def clear_settings_env(monkeypatch):
    """Start every test from built-in defaults"""
    for name in _SETTINGS_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults():
    """Unset variables give the built-in defaults"""
    settings = config.load_settings()

    assert_equal(settings.restore_days, 2)
    assert_equal(settings.restore_tier, "Bulk")
    assert_equal(settings.max_workers, 10)
    assert_equal(settings.progress_every, 10)
    assert_equal(settings.excluded_buckets, ())


def test_load_settings_reads_overrides(monkeypatch):
    """Environment overrides are parsed and normalized"""
    monkeypatch.setenv("GLACIER_RESTORE_DAYS", "7")
    monkeypatch.setenv("GLACIER_RESTORE_TIER", "standard")
    monkeypatch.setenv("GLACIER_MAX_WORKERS", "1")
    monkeypatch.setenv("GLACIER_EXCLUDED_BUCKETS", "logs, ,private")

    settings = config.load_settings()

    assert_equal(settings.restore_days, 7)
    assert_equal(settings.restore_tier, "Standard")
    assert_equal(settings.max_workers, 1)
    assert_equal(settings.excluded_buckets, ("logs", "private"))


@pytest.mark.parametrize(
    "name,value,message",
    [
        ("GLACIER_MAX_WORKERS", "abc", "must be an integer"),
        ("GLACIER_MAX_WORKERS", "0", "must be at least 1"),
        ("GLACIER_PROGRESS_EVERY", "-5", "must be at least 1"),
        ("GLACIER_RESTORE_DAYS", "two", "must be an integer"),
        ("GLACIER_RESTORE_TIER", "glacial", "must be one of Bulk, Standard, Expedited"),
    ],
)
def test_load_settings_rejects_invalid_values(monkeypatch, name, value, message):
    """Invalid overrides are configuration errors naming the variable"""
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=message) as exc_info:
        config.load_settings()

    assert name in str(exc_info.value)


def test_module_defaults_survive_invalid_values(monkeypatch):
    """Importing config never fails on a bad override"""
    monkeypatch.setenv("GLACIER_MAX_WORKERS", "abc")
    monkeypatch.setenv("GLACIER_RESTORE_TIER", "glacial")
    try:
        reloaded = importlib.reload(config)

        assert_equal(reloaded.MAX_WORKERS, config.DEFAULT_MAX_WORKERS)
        assert_equal(reloaded.GLACIER_RESTORE_TIER, config.DEFAULT_RESTORE_TIER)
    finally:
        monkeypatch.delenv("GLACIER_MAX_WORKERS")
        monkeypatch.delenv("GLACIER_RESTORE_TIER")
        importlib.reload(config)
