"""Date helpers shared by the timeline, metric and action modules.

Timestamps are stored as UTC ISO 8601 strings. Calendar-day logic (bucket
keys, day boundaries) happens in the configured application timezone.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]

START_DATE_FORMAT = "%Y-%m-%d"
MINUTE_FORMAT = "%Y-%m-%d %H:%M"


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(UTC)


def to_db(value: datetime) -> str:
    """Serialize a datetime for storage (UTC, second precision)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).replace(microsecond=0).isoformat()


def parse_db(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def from_db(value: str | None) -> datetime | None:
    """Like parse_db, passing None through."""
    if value is None:
        return None
    return parse_db(value)


def to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Convert an aware datetime to the application timezone."""
    return value.astimezone(tz)


def local_today(now: datetime, tz: ZoneInfo) -> date:
    return to_local(now, tz).date()


def day_start(day: date, tz: ZoneInfo) -> datetime:
    """First instant of a calendar day in ``tz``, returned in UTC."""
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(UTC)


def day_end(day: date, tz: ZoneInfo) -> datetime:
    """Last whole second (23:59:59) of a calendar day in ``tz``, returned in UTC."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=tz).astimezone(UTC)


def parse_start_date(value: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string. Returns None when it is not one."""
    if not value:
        return None
    try:
        return datetime.strptime(value, START_DATE_FORMAT).date()
    except ValueError:
        return None


def format_minute(value: datetime, tz: ZoneInfo) -> str:
    """Format a timestamp at minute precision in the application timezone."""
    return to_local(value, tz).strftime(MINUTE_FORMAT)


def shift_days(day: date, days: int) -> date:
    return day + timedelta(days=days)
