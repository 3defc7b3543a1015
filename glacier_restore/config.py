"""
Configuration for the glacier restore tool.

Every value can be overridden through the environment, which is also where
the .env credentials file is loaded from (see aws_clients.py).

The module-level constants never fail to import: an invalid environment
value falls back to the built-in default. The CLI calls load_settings(),
which reports the same invalid values as ConfigurationError.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from .exceptions import ConfigurationError

__all__ = [
    "EXCLUDED_BUCKETS",
    "GLACIER_RESTORE_DAYS",
    "GLACIER_RESTORE_TIER",
    "MAX_WORKERS",
    "PROGRESS_EVERY",
    "Settings",
    "VALID_RESTORE_TIERS",
    "load_settings",
]

_T = TypeVar("_T")

# Retrieval tiers accepted by S3 restore_object
VALID_RESTORE_TIERS: tuple[str, ...] = ("Bulk", "Standard", "Expedited")

DEFAULT_RESTORE_DAYS = 2
DEFAULT_RESTORE_TIER = "Bulk"
DEFAULT_MAX_WORKERS = 10
DEFAULT_PROGRESS_EVERY = 10


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment.

    Raises:
        ConfigurationError: If the value is not an integer or is below 1
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return value


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def determine_restore_tier() -> str:
    """Return the configured retrieval tier in its canonical spelling.

    Raises:
        ConfigurationError: If GLACIER_RESTORE_TIER names an unknown tier
    """
    raw = os.environ.get("GLACIER_RESTORE_TIER", "").strip()
    if not raw:
        return DEFAULT_RESTORE_TIER
    for tier in VALID_RESTORE_TIERS:
        if tier.lower() == raw.lower():
            return tier
    raise ConfigurationError(
        f"GLACIER_RESTORE_TIER must be one of {', '.join(VALID_RESTORE_TIERS)}, got {raw!r}"
    )


@dataclass(frozen=True)
class Settings:
    """Validated runtime settings."""

    restore_days: int
    restore_tier: str
    max_workers: int
    progress_every: int
    excluded_buckets: tuple[str, ...]


def load_settings() -> Settings:
    """Read and validate all settings from the environment.

    Raises:
        ConfigurationError: If any environment override is invalid
    """
    return Settings(
        restore_days=_env_int("GLACIER_RESTORE_DAYS", DEFAULT_RESTORE_DAYS),
        restore_tier=determine_restore_tier(),
        max_workers=_env_int("GLACIER_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        progress_every=_env_int("GLACIER_PROGRESS_EVERY", DEFAULT_PROGRESS_EVERY),
        excluded_buckets=tuple(_env_list("GLACIER_EXCLUDED_BUCKETS")),
    )


def _get_default(loader: Callable[[], _T], fallback: _T) -> _T:
    """Lazily retrieve a default, ignoring invalid overrides."""
    try:
        return loader()
    except ConfigurationError:
        return fallback


# Glacier restore settings
GLACIER_RESTORE_DAYS: int = _get_default(
    lambda: _env_int("GLACIER_RESTORE_DAYS", DEFAULT_RESTORE_DAYS), DEFAULT_RESTORE_DAYS
)  # Days to keep restored copy available
GLACIER_RESTORE_TIER: str = _get_default(determine_restore_tier, DEFAULT_RESTORE_TIER)  # Bulk, Standard, Expedited

# Concurrent restore_object / head_object calls; 1 means fully sequential
MAX_WORKERS: int = _get_default(lambda: _env_int("GLACIER_MAX_WORKERS", DEFAULT_MAX_WORKERS), DEFAULT_MAX_WORKERS)

# Report progress every N processed objects
PROGRESS_EVERY: int = _get_default(
    lambda: _env_int("GLACIER_PROGRESS_EVERY", DEFAULT_PROGRESS_EVERY), DEFAULT_PROGRESS_EVERY
)

# Buckets skipped by the list command (e.g., buckets you can't access)
EXCLUDED_BUCKETS: list[str] = _env_list("GLACIER_EXCLUDED_BUCKETS")
