"""Date helpers: canonical YYYY-MM-DD keys, display formatting, timestamps."""

import re
from datetime import date, datetime, timedelta
from typing import Optional

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def normalize_date(value: Optional[str]) -> str:
    """Reduce a date-like string to its YYYY-MM-DD key.

    Upstream sources sometimes append a time of day ("2024-01-10 08:00:00" or
    "2024-01-10T08:00:00Z"), so the value is trimmed and cut to the first
    10 characters. Idempotent.
    """
    if not value:
        return ""
    return str(value).strip()[:10].strip()


def canonical_date(value: Optional[str]) -> str:
    """Zero-padded YYYY-MM-DD for a date-like value ("2024-1-5" -> "2024-01-05").

    Raises ValueError when the value is not a calendar date.
    """
    return datetime.strptime(normalize_date(value), "%Y-%m-%d").date().isoformat()


def date_key(value: Optional[str]) -> str:
    """Lookup key for a date: the canonical form when parseable, else the normalized text."""
    try:
        return canonical_date(value)
    except ValueError:
        return normalize_date(value)


def month_of(value: Optional[str]) -> str:
    """YYYY-MM prefix of a date-like string."""
    return date_key(value)[:7]


def format_display_date(value: Optional[str]) -> str:
    """Format a date key as e.g. "Wed, 10 Jan 2024". Unparseable input is returned as-is."""
    key = normalize_date(value)
    try:
        parsed = datetime.strptime(key, "%Y-%m-%d")
    except ValueError:
        return key
    return parsed.strftime("%a, %d %b %Y")


def is_valid_date(value: Optional[str]) -> bool:
    try:
        canonical_date(value)
    except ValueError:
        return False
    return True


def normalize_month(value: Optional[str]) -> str:
    return (value or "").strip()


def is_valid_month(value: Optional[str]) -> bool:
    """True for a zero-padded YYYY-MM month key."""
    return bool(MONTH_PATTERN.match(normalize_month(value)))


def today_iso() -> str:
    return date.today().isoformat()


def current_month_iso() -> str:
    return date.today().strftime("%Y-%m")


def db_timestamp(hours: float = 0) -> str:
    """UTC timestamp stored on records and log entries, optionally shifted by `hours`."""
    moment = datetime.utcnow() + timedelta(hours=hours)
    return moment.isoformat(timespec="seconds") + "Z"
