"""Parse the S3 ``Restore`` header returned by head_object.

S3 sends values such as::

    ongoing-request="true"
    ongoing-request="false", expiry-date="Fri, 21 Dec 2012 00:00:00 GMT"
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from .models import RestoreMarker, RestoreState

_FIELD_RE = re.compile(r'([A-Za-z][\w-]*)\s*=\s*"([^"]*)"')


def parse_expiry(value: str | None) -> datetime | None:
    """Parse an expiry-date value; returns None when it can't be read."""
    if not value or not value.strip():
        return None
    value = value.strip()
    parsed: datetime | None = None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_restore_marker(raw: str | None) -> RestoreMarker:
    """
    Turn a Restore header into a RestoreMarker.

    - no header: NOT_REQUESTED
    - ongoing-request="true": IN_PROGRESS
    - anything else: COMPLETED, with the expiry when it parses

    A header that is present but unreadable is treated as COMPLETED with an
    unknown expiry instead of raising.
    """
    if raw is None or not raw.strip():
        return RestoreMarker(RestoreState.NOT_REQUESTED)
    fields = {name.lower(): value for name, value in _FIELD_RE.findall(raw)}
    if fields.get("ongoing-request", "").strip().lower() == "true":
        return RestoreMarker(RestoreState.IN_PROGRESS)
    return RestoreMarker(RestoreState.COMPLETED, parse_expiry(fields.get("expiry-date")))
