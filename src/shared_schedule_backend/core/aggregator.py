'''
Schedule Aggregator.

Resolves an owner's full entry set against a single day (ordered occurrence
list) or a whole month (day -> color indicator map). Everything here is a
pure function of its inputs; callers re-run it on every new snapshot.
'''
from datetime import date, datetime
from typing import Any, Iterable, NamedTuple, Optional

from ..common.exceptions import MalformedInputError
from ..common.logger import log
from .entries import Occurrence, ScheduleEntry, parse_entry
from .recurrence import YearMonth, as_calendar_date, matches, overlaps_month


def _occurrence_order(entry: ScheduleEntry) -> tuple[datetime, str]:
    return (entry.start_utc, entry.id)


def occurrences_on_date(
    entries: Iterable[ScheduleEntry],
    day: date | datetime
) -> tuple[Occurrence, ...]:
    """
    Occurrences of `entries` on `day`, ascending by start instant.
    Entries starting at the same instant are ordered by id so the result does
    not depend on the order the storage layer returned them in.
    """
    target = as_calendar_date(day)
    matching = sorted(
        (entry for entry in entries if matches(entry, target)),
        key=_occurrence_order
    )
    return tuple(Occurrence.from_entry(entry, target) for entry in matching)


def month_indicators(
    entries: Iterable[ScheduleEntry],
    year_month: YearMonth
) -> dict[date, str]:
    """
    Maps each day of the month that has at least one matching entry to a
    color. When several entries match the same day, the last one in input
    order wins; days without matches are left out of the map.
    """
    candidates = [entry for entry in entries if overlaps_month(entry, year_month)]
    indicators: dict[date, str] = {}
    for day in year_month.days():
        for entry in candidates:
            if matches(entry, day):
                indicators[day] = entry.activity_color
    return indicators


class SkippedRecord(NamedTuple):
    record_id: Optional[str]
    reason: str


class ScheduleSnapshot:
    """
    An immutable, point-in-time view of one owner's entries.

    Built from raw storage records with `build_snapshot`; malformed records
    are skipped and listed in `skipped` instead of failing the whole view.
    """
    __slots__ = ("_entries", "_skipped")

    def __init__(self, entries: Iterable[ScheduleEntry], skipped: Iterable[SkippedRecord] = ()):
        self._entries = tuple(entries)
        self._skipped = tuple(skipped)

    @property
    def entries(self) -> tuple[ScheduleEntry, ...]:
        return self._entries

    @property
    def skipped(self) -> tuple[SkippedRecord, ...]:
        return self._skipped

    @property
    def skipped_count(self) -> int:
        return len(self._skipped)

    def occurrences_on_date(self, day: date | datetime) -> tuple[Occurrence, ...]:
        return occurrences_on_date(self._entries, day)

    def month_indicators(self, year_month: YearMonth) -> dict[date, str]:
        return month_indicators(self._entries, year_month)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ScheduleSnapshot(entries={len(self._entries)}, skipped={len(self._skipped)})"


def build_snapshot(records: Iterable[Any]) -> ScheduleSnapshot:
    """
    Parses a complete storage snapshot. Each record that does not have the
    shape of a schedule entry is logged and skipped.
    """
    entries: list[ScheduleEntry] = []
    skipped: list[SkippedRecord] = []
    for record in records:
        try:
            entries.append(parse_entry(record))
        except MalformedInputError as e:
            log.warning(f"Skipping malformed schedule record {e.record_id}: {e.reason}")
            skipped.append(SkippedRecord(e.record_id, e.reason))
    return ScheduleSnapshot(entries, skipped)
