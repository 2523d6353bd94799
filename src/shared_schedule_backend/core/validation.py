'''
Creation-time gate for schedule entries.

Turns a draft (wall-clock input already converted to UTC) into a complete
ScheduleEntry, or raises a ScheduleValidationError naming the failed
constraint. Nothing reaches storage unless this passes.
'''
from datetime import date, datetime
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..common.exceptions import NotFoundError, ScheduleValidationError
from .entries import Activity, RecurrenceType, ScheduleEntry


class ScheduleEntryDraft(BaseModel):
    """What the owner submitted, before validation and activity snapshotting."""
    activity_id: str
    anchor_date: date
    start_utc: datetime
    end_utc: datetime
    recurrence_type: RecurrenceType = RecurrenceType.NONE
    recurrence_days: list[int] = Field(default_factory=list)
    recurrence_start: Optional[date] = None
    recurrence_end: Optional[date] = None

    model_config = ConfigDict(frozen=True)


def check_draft(draft: ScheduleEntryDraft) -> None:
    """Raises ScheduleValidationError for the first constraint the draft breaks."""
    if draft.start_utc >= draft.end_utc:
        raise ScheduleValidationError("end_time_after_start", "End time must be after start time.")

    if draft.recurrence_type == RecurrenceType.NONE:
        return

    if draft.recurrence_start is None:
        raise ScheduleValidationError(
            "recurrence_start_required",
            "Please provide a start date for the repeating schedule."
        )
    if draft.recurrence_end is not None and draft.recurrence_start > draft.recurrence_end:
        raise ScheduleValidationError(
            "recurrence_window_order",
            "Recurrence end date cannot be before start date."
        )
    if draft.recurrence_type == RecurrenceType.WEEKLY:
        if not draft.recurrence_days:
            raise ScheduleValidationError(
                "weekly_days_required",
                "Please select at least one day for weekly recurrence."
            )
        invalid = [d for d in draft.recurrence_days if not 0 <= d <= 6]
        if invalid:
            raise ScheduleValidationError(
                "weekday_range",
                f"Weekdays must be between 0 (Sunday) and 6 (Saturday), got {invalid}."
            )


def validate_new_entry(
    entry_id: str,
    draft: ScheduleEntryDraft,
    activities: Iterable[Activity]
) -> ScheduleEntry:
    """
    Validates a draft and snapshots the referenced activity into it.
    Weekdays are only kept for weekly entries and the window only for
    recurring ones.
    """
    check_draft(draft)

    activity = next((a for a in activities if a.id == draft.activity_id), None)
    if activity is None:
        raise NotFoundError("Activity", draft.activity_id)

    is_recurring = draft.recurrence_type != RecurrenceType.NONE
    return ScheduleEntry(
        id=entry_id,
        activity_id=activity.id,
        activity_name=activity.name,
        activity_color=activity.color,
        start_utc=draft.start_utc,
        end_utc=draft.end_utc,
        anchor_date=draft.anchor_date,
        recurrence_type=draft.recurrence_type,
        recurrence_days=frozenset(draft.recurrence_days) if draft.recurrence_type == RecurrenceType.WEEKLY else frozenset(),
        recurrence_start=draft.recurrence_start if is_recurring else None,
        recurrence_end=draft.recurrence_end if is_recurring else None,
    )
