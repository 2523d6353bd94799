'''
Schedule API Models
'''
from datetime import date, datetime, time
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.entries import RecurrenceType


class ScheduleEntryCreate(BaseModel):
    """
    Payload for placing an activity on the calendar.
    'start_time' and 'end_time' are wall-clock times on 'date' in the
    owner's time zone; the service converts them to UTC.
    'recurrence_days' uses 0=Sunday ... 6=Saturday and only matters for weekly entries.
    """
    activity_id: UUID
    date: date
    start_time: time = Field(..., description="Wall-clock start, e.g. '09:00'")
    end_time: time = Field(..., description="Wall-clock end, e.g. '10:00'")
    recurrence_type: RecurrenceType = RecurrenceType.NONE
    recurrence_days: list[Annotated[int, Field(ge=0, le=6)]] = Field(default_factory=list)
    recurrence_start_date: Optional[date] = None
    recurrence_end_date: Optional[date] = None


class ScheduleEntryRead(BaseModel):
    """
    A stored entry as returned by the API.
    """
    id: UUID
    activity_id: UUID
    activity_name: str
    activity_color: str
    start_utc: datetime
    end_utc: datetime
    anchor_date: date
    recurrence_type: RecurrenceType
    recurrence_days: list[int] = Field(default_factory=list)
    recurrence_start: Optional[date] = None
    recurrence_end: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("recurrence_days", mode="before")
    @classmethod
    def _sorted_days(cls, value):
        return sorted(value) if value else []


class OccurrenceRead(BaseModel):
    """
    One occurrence on the requested day, with its times rendered in the
    requested display time zone.
    """
    entry_id: UUID
    activity_id: UUID
    activity_name: str
    activity_color: str
    start_utc: datetime
    end_utc: datetime
    start_local: datetime
    end_local: datetime
    time_range: str = Field(..., description="e.g. '09:00 AM - 10:00 AM'")
    recurrence_type: RecurrenceType
    recurrence_label: str = Field("", description="e.g. 'Weekly on Mon, Wed from 2024-03-01'")


class DayScheduleRead(BaseModel):
    date: date
    date_label: str
    timezone: str
    occurrences: list[OccurrenceRead] = Field(default_factory=list)
    skipped_records: int = 0


class MonthIndicatorsRead(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    indicators: dict[date, str] = Field(default_factory=dict)
    skipped_records: int = 0


class ShareLinkRead(BaseModel):
    owner_id: UUID
    date: date
    url: str


class SharedScheduleRead(BaseModel):
    """
    Read-only view of someone's day, rendered in the viewer's time zone.
    """
    owner_id: UUID
    owner_display_name: str
    owner_timezone: str
    viewer_timezone: str
    date: date
    date_label: str
    occurrences: list[OccurrenceRead] = Field(default_factory=list)
    skipped_records: int = 0
