"""Best-effort Date header parsing."""

from __future__ import annotations

import email.utils
import re
from datetime import datetime, timezone

# Tried in order, first match wins
DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %z",
    "%d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S",
    "%d %b %Y %H:%M:%S",
    "%a, %d %b %Y %H:%M %z",
    "%d %b %Y %H:%M %z",
]

_COMMENT = re.compile(r"\s*\([^)]*\)\s*$")


def _has_epoch(value: datetime) -> bool:
    """Whether ``value`` converts to epoch seconds on this platform."""
    try:
        value.timestamp()
    except (ValueError, OverflowError, OSError):
        return False
    return True


def _candidates(value: str):
    matched = False
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        matched = True
        yield parsed
    if matched:
        return
    # Named zones such as GMT, UT or EST
    try:
        yield email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        pass


def parse_date(value: str) -> datetime:
    """Parse a Date header value, falling back to the current time.

    A trailing comment such as ``(PST)`` is ignored. Values without a zone are
    returned naive and read as local time. A date that cannot be expressed in
    epoch seconds counts as unparseable.
    """
    value = _COMMENT.sub("", value.strip())
    value = " ".join(value.split())
    for parsed in _candidates(value):
        if _has_epoch(parsed):
            return parsed
    return datetime.now(timezone.utc)


def message_date(raw: str) -> datetime:
    """Return the timestamp of the first Date header in the header block."""
    for line in raw.split("\n"):
        if not line.strip():
            break
        if line[:5].lower() == "date:":
            return parse_date(line[5:])
    return datetime.now(timezone.utc)
