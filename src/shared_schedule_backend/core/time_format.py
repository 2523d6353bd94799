'''
Time-zone conversion and formatting helpers.

Stored instants are UTC; these helpers render them for a viewer's zone and
turn wall-clock input typed in an owner's zone back into UTC instants.
'''
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..common.exceptions import ScheduleValidationError
from ..common.logger import log

# Zones offered for selection; any valid IANA name is accepted.
COMMON_TIME_ZONES = [
    'America/New_York',
    'America/Chicago',
    'America/Denver',
    'America/Los_Angeles',
    'Europe/London',
    'Europe/Paris',
    'Asia/Dubai',
    'Asia/Kolkata',
    'Asia/Tokyo',
    'Australia/Sydney',
    'Pacific/Auckland',
    'UTC',
]

TIME_FORMAT = "%I:%M %p"
_WALL_CLOCK_FORMATS = ("%H:%M", "%I:%M %p", "%H:%M:%S")


def resolve_zone(name: str | None, strict: bool = False) -> ZoneInfo:
    """
    Returns the ZoneInfo for an IANA zone name.
    In lenient mode unknown names fall back to UTC; in strict mode they
    raise a ScheduleValidationError.
    """
    try:
        if not name:
            raise ZoneInfoNotFoundError(name)
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        if strict:
            raise ScheduleValidationError("valid_timezone", f"Unknown time zone '{name}'.")
        log.warning(f"Invalid timezone '{name}', defaulting to UTC.")
        return ZoneInfo("UTC")


def to_zone(instant: datetime, zone: ZoneInfo | str) -> datetime:
    """Converts an aware instant into the given zone."""
    if instant.tzinfo is None:
        raise ValueError("Cannot convert a naive datetime; instants must be timezone-aware.")
    tz = zone if isinstance(zone, ZoneInfo) else resolve_zone(zone)
    return instant.astimezone(tz)


def format_time(instant: datetime, zone: ZoneInfo | str) -> str:
    """e.g. '09:00 AM'"""
    return to_zone(instant, zone).strftime(TIME_FORMAT)


def format_time_range(start: datetime, end: datetime, zone: ZoneInfo | str) -> str:
    return f"{format_time(start, zone)} - {format_time(end, zone)}"


def format_date(day: date) -> str:
    """e.g. 'Sunday, March 10, 2024'"""
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def parse_time_of_day(text: str) -> time:
    """Accepts 'HH:MM' (24h), 'HH:MM:SS' or 'hh:MM AM/PM'."""
    cleaned = text.strip().upper()
    for fmt in _WALL_CLOCK_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised time of day '{text}'.")


def parse_wall_clock(day: date, value: str | time, zone: ZoneInfo | str, fold: int = 0) -> datetime:
    """
    Interprets a wall-clock time on `day` in `zone` and returns the UTC instant.
    `fold` picks the second of two repeated wall-clock times at a DST fall-back.
    Times skipped by a DST spring-forward raise `ScheduleValidationError`.
    """
    tz = zone if isinstance(zone, ZoneInfo) else resolve_zone(zone)
    time_of_day = value if isinstance(value, time) else parse_time_of_day(value)
    local = datetime.combine(day, time_of_day.replace(tzinfo=None), tzinfo=tz).replace(fold=fold)
    instant = local.astimezone(timezone.utc)

    # A skipped wall time comes back shifted by the size of the gap.
    if instant.astimezone(tz).replace(tzinfo=None, fold=0) != local.replace(tzinfo=None, fold=0):
        log.warning(f"Wall-clock time {time_of_day:%H:%M} on {day} does not exist in {tz.key}.")
        raise ScheduleValidationError(
            "wall_clock_exists",
            f"{time_of_day:%H:%M} does not exist on {day.isoformat()} in {tz.key}; "
            f"the clocks jump past it for daylight saving time."
        )
    return instant
