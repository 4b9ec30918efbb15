"""
Time helpers - UTC normalisation, calendar windows and timestamp text formats

Every timestamp stored by the app is a naive datetime in UTC. Day and month
windows are half-open: [start, end) where end is the start of the next
day or month.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

from atams.exceptions import BadRequestException

# ISO-8601, second precision, explicit UTC designator
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow() -> datetime:
    """Current time as naive UTC, truncated to whole seconds"""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_stored_time(value: datetime) -> datetime:
    """Naive UTC truncated to whole seconds, the precision of the CSV format"""
    return to_utc_naive(value).replace(microsecond=0)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach the UTC zone to a stored (naive UTC) datetime"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: Union[date, datetime]) -> Tuple[datetime, datetime]:
    """Return [start of day, start of next day)"""
    if isinstance(day, datetime):
        day = to_utc_naive(day).date()
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(day: Union[date, datetime]) -> Tuple[datetime, datetime]:
    """Return [first of month, first of next month) for the month containing day"""
    if isinstance(day, datetime):
        day = to_utc_naive(day).date()
    start = datetime(day.year, day.month, 1)
    if day.month == 12:
        end = datetime(day.year + 1, 1, 1)
    else:
        end = datetime(day.year, day.month + 1, 1)
    return start, end


def format_timestamp(value: datetime) -> str:
    return to_utc_naive(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into naive UTC

    Accepts a trailing 'Z' or a numeric offset, with or without fractional
    seconds. A value without zone information is taken as UTC.

    Raises:
        BadRequestException: If the text is empty or not a timestamp
    """
    raw = (text or "").strip()
    if not raw:
        raise BadRequestException("Timestamp is empty")
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise BadRequestException(f"Invalid timestamp: {text!r}")
    return to_utc_naive(parsed)


def format_duration(seconds: Optional[float]) -> Optional[str]:
    """Format seconds as HH:MM; hours are not wrapped at 24"""
    if seconds is None:
        return None
    total = int(seconds)
    hours = total // 3600
    minutes = total % 3600 // 60
    return f"{hours:02d}:{minutes:02d}"
