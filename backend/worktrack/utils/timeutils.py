from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware_utc(dt: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def zone_for(name: str | None):
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # Names like "America" resolve to a directory of zone files.
        return timezone.utc


def local_date(now: datetime, tz_name: str | None) -> date:
    """Calendar date of ``now`` as seen in ``tz_name``."""
    return ensure_aware_utc(now).astimezone(zone_for(tz_name)).date()


def isoformat_or_none(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware_utc(value).isoformat()
    return value.isoformat()
