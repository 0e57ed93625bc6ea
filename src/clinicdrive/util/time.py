from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse RFC3339 timestamp string into tz-aware UTC datetime.

    Accepts strings like:
      - 2025-01-01T12:34:56Z
      - 2025-01-01T12:34:56.123Z
      - 2025-01-01T12:34:56+09:00
    """
    if not isinstance(value, str) or not value:
        raise ValueError("RFC3339 value must be a non-empty string")

    s = value.strip()
    # Python's fromisoformat doesn't accept 'Z' in 3.9/3.10, so normalize.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)  # raises ValueError if invalid
    return ensure_utc(dt)


def to_rfc3339(dt: datetime) -> str:
    """Convert datetime to RFC3339 (UTC, with 'Z'), keeping milliseconds."""
    s = ensure_utc(dt).isoformat(timespec="milliseconds")
    return s.replace("+00:00", "Z")


def ensure_utc(dt: datetime) -> datetime:
    """
    Return dt as tz-aware UTC.

    Naive datetimes are taken to be UTC already (google-auth stores token
    expiry that way).
    """
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
