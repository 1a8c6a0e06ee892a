"""Clock and civil time zone helpers."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from fallback_webhook.config import settings

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@lru_cache(maxsize=8)
def get_zone(tz_name: Optional[str] = None) -> ZoneInfo:
    """Resolve a named civil zone, defaulting to the configured one."""
    return ZoneInfo(tz_name or settings.BUSINESS_TIMEZONE)


def civil_now(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> datetime:
    """Convert an instant (default: now) to local civil time."""
    instant = now or system_clock()
    if instant.tzinfo is None:
        raise ValueError("Naive datetimes are ambiguous; pass an aware instant")
    return instant.astimezone(get_zone(tz_name))


def civil_isoformat(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> str:
    """ISO-8601 string of the instant in local civil time, millisecond precision."""
    return civil_now(now, tz_name).isoformat(timespec="milliseconds")


def display_civil_time(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> str:
    """Human readable local time for status pages and logs."""
    return civil_now(now, tz_name).strftime("%Y-%m-%d %H:%M:%S %Z")


def to_epoch_ms(instant: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return int(instant.timestamp() * 1000)
