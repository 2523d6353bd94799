'''
Occurrence Matcher.

Decides whether a single ScheduleEntry occurs on a given calendar day.
All dates handled here are owner-local calendar dates; no zone conversion
happens in this module.
'''
import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, NamedTuple

from .entries import RecurrenceType, ScheduleEntry

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def as_calendar_date(candidate: date | datetime) -> date:
    """Truncates a datetime to its calendar date (no zone conversion)."""
    if isinstance(candidate, datetime):
        return candidate.date()
    return candidate


def weekday_index(day: date) -> int:
    """0=Sunday ... 6=Saturday."""
    return day.isoweekday() % 7


def within_window(entry: ScheduleEntry, day: date) -> bool:
    """Inclusive recurrence-window check; an absent bound is unbounded."""
    if entry.recurrence_start is not None and day < entry.recurrence_start:
        return False
    if entry.recurrence_end is not None and day > entry.recurrence_end:
        return False
    return True


def matches(entry: ScheduleEntry, candidate: date | datetime) -> bool:
    """
    True when `entry` occurs on the calendar day of `candidate`.
    One-time entries only match their anchor date; their window fields are
    ignored even when present.
    """
    day = as_calendar_date(candidate)

    if entry.recurrence_type == RecurrenceType.NONE:
        return day == entry.anchor_date

    if not within_window(entry, day):
        return False

    if entry.recurrence_type == RecurrenceType.DAILY:
        return True
    if entry.recurrence_type == RecurrenceType.WEEKLY:
        return weekday_index(day) in entry.recurrence_days

    raise ValueError(f"Unsupported recurrence type: {entry.recurrence_type!r}")


class YearMonth(NamedTuple):
    """A calendar month, used as the unit of the month indicator view."""
    year: int
    month: int

    @classmethod
    def of(cls, day: date) -> "YearMonth":
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """Parses 'YYYY-MM'."""
        try:
            year_part, month_part = text.strip().split("-")
            year_month = cls(int(year_part), int(month_part))
            year_month.first_day  # out-of-range years and months raise here
        except ValueError:
            raise ValueError(f"Invalid month '{text}', expected YYYY-MM with a year of 1-9999 and a month of 1-12.") from None
        return year_month

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def days(self) -> Iterator[date]:
        day = self.first_day
        last = self.last_day
        while day <= last:
            yield day
            day += timedelta(days=1)

    def next(self) -> "YearMonth":
        if self.month == 12:
            return YearMonth(self.year + 1, 1)
        return YearMonth(self.year, self.month + 1)

    def previous(self) -> "YearMonth":
        if self.month == 1:
            return YearMonth(self.year - 1, 12)
        return YearMonth(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def overlaps_month(entry: ScheduleEntry, year_month: YearMonth) -> bool:
    """
    Whether the entry can match any day of the month at all.
    Used to skip entries before the per-day scan; it never changes results.
    """
    first, last = year_month.first_day, year_month.last_day
    if entry.recurrence_type == RecurrenceType.NONE:
        return first <= entry.anchor_date <= last

    starts_before_month_ends = entry.recurrence_start is None or entry.recurrence_start <= last
    ends_after_month_starts = entry.recurrence_end is None or entry.recurrence_end >= first
    return starts_before_month_ends and ends_after_month_starts


def describe_recurrence(entry: ScheduleEntry) -> str:
    """
    Short label for list rendering, e.g. 'Weekly on Mon, Wed from 2024-03-01'.
    Empty for one-time entries.
    """
    if entry.recurrence_type == RecurrenceType.NONE:
        return ""

    if entry.recurrence_type == RecurrenceType.DAILY:
        label = "Daily"
    else:
        days = ", ".join(WEEKDAY_NAMES[d][:3] for d in sorted(entry.recurrence_days))
        label = f"Weekly on {days}"

    if entry.recurrence_start is not None:
        label += f" from {entry.recurrence_start.isoformat()}"
    if entry.recurrence_end is not None:
        label += f" to {entry.recurrence_end.isoformat()}"
    return label
