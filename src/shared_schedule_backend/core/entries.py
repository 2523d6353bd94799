'''
Engine-level records: activities, schedule entries and resolved occurrences.

These are immutable value objects. The storage layer hands over plain
records (mappings or ORM rows) which are turned into `ScheduleEntry`
objects by `parse_entry`; nothing in here performs I/O.
'''
import enum
from datetime import date, datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import (
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..common.exceptions import MalformedInputError


class RecurrenceType(str, enum.Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"


def _as_identifier(value: Any) -> Any:
    # UUIDs coming from the database are treated as opaque strings.
    if value is None or isinstance(value, str):
        return value
    return str(value)

EntryId = Annotated[str, BeforeValidator(_as_identifier)]
Weekday = Annotated[int, Field(ge=0, le=6)]


class Activity(BaseModel):
    """A user-defined category of time use."""
    id: EntryId
    name: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, from_attributes=True)


class ScheduleEntry(BaseModel):
    """
    One placed or recurring block of time.

    `start_utc`/`end_utc` fix the time-of-day and duration of every
    occurrence; the activity name and color are the snapshot taken when the
    entry was created and are never re-resolved.
    """
    id: EntryId
    activity_id: EntryId
    activity_name: str = Field(..., min_length=1)
    activity_color: str = Field(..., min_length=1)
    start_utc: AwareDatetime
    end_utc: AwareDatetime
    anchor_date: date
    recurrence_type: RecurrenceType = RecurrenceType.NONE
    recurrence_days: frozenset[Weekday] = frozenset()
    recurrence_start: Optional[date] = None
    recurrence_end: Optional[date] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("start_utc", "end_utc")
    @classmethod
    def _normalize_to_utc(cls, value: datetime) -> datetime:
        return value.astimezone(timezone.utc)

    @field_validator("anchor_date", "recurrence_start", "recurrence_end", mode="before")
    @classmethod
    def _strip_time_of_day(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("recurrence_days", mode="before")
    @classmethod
    def _none_means_no_days(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    @model_validator(mode="after")
    def _check_shape(self) -> "ScheduleEntry":
        if self.start_utc >= self.end_utc:
            raise ValueError("start_utc must be strictly before end_utc")
        if self.recurrence_type == RecurrenceType.WEEKLY and not self.recurrence_days:
            raise ValueError("weekly entries need at least one weekday")
        if (
            self.recurrence_type != RecurrenceType.NONE
            and self.recurrence_start is not None
            and self.recurrence_end is not None
            and self.recurrence_start > self.recurrence_end
        ):
            raise ValueError("recurrence_start is after recurrence_end")
        return self

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_type != RecurrenceType.NONE


class Occurrence(BaseModel):
    """
    A single calendar-day realization of a ScheduleEntry.
    The instants are carried over unchanged; rendering into a viewer's zone
    happens afterwards in `core.time_format`.
    """
    entry_id: str
    on_date: date
    activity_id: str
    activity_name: str
    activity_color: str
    start_utc: datetime
    end_utc: datetime
    recurrence_type: RecurrenceType
    recurrence_days: frozenset[int]
    recurrence_start: Optional[date] = None
    recurrence_end: Optional[date] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_entry(cls, entry: ScheduleEntry, on_date: date) -> "Occurrence":
        return cls(
            entry_id=entry.id,
            on_date=on_date,
            activity_id=entry.activity_id,
            activity_name=entry.activity_name,
            activity_color=entry.activity_color,
            start_utc=entry.start_utc,
            end_utc=entry.end_utc,
            recurrence_type=entry.recurrence_type,
            recurrence_days=entry.recurrence_days,
            recurrence_start=entry.recurrence_start,
            recurrence_end=entry.recurrence_end,
        )


def _record_id(record: Any) -> Optional[str]:
    if isinstance(record, dict):
        raw = record.get("id")
    else:
        raw = getattr(record, "id", None)
    return None if raw is None else str(raw)


def parse_entry(record: Any) -> ScheduleEntry:
    """
    Builds a ScheduleEntry from a storage record.
    Accepts a mapping or any object exposing the entry attributes (e.g. an
    ORM row). Raises MalformedInputError when the record has the wrong shape.
    """
    if isinstance(record, ScheduleEntry):
        return record
    try:
        return ScheduleEntry.model_validate(record, from_attributes=not isinstance(record, dict))
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedInputError(reasons, record_id=_record_id(record)) from e
