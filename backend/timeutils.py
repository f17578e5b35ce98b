from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from errors import InternalError, ValidationError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def get_zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise InternalError(f"Unknown timezone: {tz}")


def to_datetime(date_str: str, time_str: str, tz: str) -> datetime:
    """Combine 'YYYY-MM-DD' and 'HH:MM' into an aware datetime in ``tz``."""
    try:
        day = datetime.strptime(date_str, DATE_FORMAT).date()
        clock = datetime.strptime(time_str, TIME_FORMAT).time()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date or time: {date_str} {time_str}")
    return datetime.combine(day, clock, tzinfo=get_zone(tz))


def booking_window(date_str: str, time_str: str, duration: int, tz: str) -> tuple[datetime, datetime]:
    start = to_datetime(date_str, time_str, tz)
    # elapsed time, so a DST change inside the window keeps its real length
    try:
        end = (start.astimezone(timezone.utc) + timedelta(minutes=duration)).astimezone(start.tzinfo)
    except OverflowError:
        raise ValidationError(f"Duration out of range: {duration}")
    return start, end


def to_rfc3339(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")
