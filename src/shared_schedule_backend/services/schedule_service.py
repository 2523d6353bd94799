'''
Schedule Service

Storage-facing side of the schedule engine: creates and deletes entries,
loads an owner's full entry set and hands it to the aggregator for the day
and month views.
'''
import uuid
from datetime import date
from typing import Annotated, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

from ..common.config import settings
from ..common.exceptions import NotFoundError
from ..common.logger import log
from ..core.aggregator import ScheduleSnapshot, build_snapshot
from ..core.entries import Occurrence
from ..core.recurrence import YearMonth, describe_recurrence
from ..core.snapshots import SnapshotHub, snapshot_hub
from ..core.time_format import format_date, format_time_range, parse_wall_clock, resolve_zone, to_zone
from ..core.validation import ScheduleEntryDraft, validate_new_entry
from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import schedule as schedule_models
from .activity_service import ActivityService


def get_snapshot_hub() -> SnapshotHub:
    return snapshot_hub


# Snapshots built inside a transaction wait in `session.info` under this key
# and reach the hub only once that transaction commits.
PENDING_SNAPSHOTS_KEY = "pending_schedule_snapshots"


@event.listens_for(Session, "after_commit")
def _publish_pending_snapshots(session: Session):
    pending = session.info.pop(PENDING_SNAPSHOTS_KEY, {})
    for owner_id, (hub, snapshot) in pending.items():
        hub.replace(owner_id, snapshot)


@event.listens_for(Session, "after_transaction_end")
def _discard_pending_snapshots(session: Session, transaction: SessionTransaction):
    if transaction.parent is not None:
        return
    discarded = session.info.pop(PENDING_SNAPSHOTS_KEY, None)
    if discarded:
        log.info(f"Discarded {len(discarded)} unpublished schedule snapshot(s); the transaction did not commit.")


class ScheduleService:
    """
    Service for schedule entries and the views computed from them.
    """
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        activity_service: Annotated[ActivityService, Depends(ActivityService)],
        hub: Annotated[SnapshotHub, Depends(get_snapshot_hub)]
    ):
        self.db = db
        self.activity_service = activity_service
        self.hub = hub

    # --- Internal Fetchers ---

    async def _get_entry_rows(self, owner_id: UUID) -> list[db_models.ScheduleEntries]:
        stmt = select(db_models.ScheduleEntries).filter(
            db_models.ScheduleEntries.owner_id == owner_id
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def load_snapshot(self, owner_id: UUID) -> ScheduleSnapshot:
        """
        Loads the owner's complete entry set and parses it.
        Malformed rows are skipped and counted by the snapshot.
        """
        rows = await self._get_entry_rows(owner_id)
        snapshot = build_snapshot(rows)
        if snapshot.skipped_count:
            log.warning(f"Owner {owner_id}: skipped {snapshot.skipped_count} malformed schedule record(s).")
        return snapshot

    async def _publish_on_commit(self, owner_id: UUID):
        """
        Builds the owner's snapshot as of this transaction and hands it to the
        hub once the session commits. A rollback drops it unseen.
        """
        await self.db.flush()
        snapshot = build_snapshot(await self._get_entry_rows(owner_id))
        pending = self.db.info.setdefault(PENDING_SNAPSHOTS_KEY, {})
        pending[str(owner_id)] = (self.hub, snapshot)

    # --- Formatting ---

    @staticmethod
    def format_occurrence(occurrence: Occurrence, zone: ZoneInfo) -> schedule_models.OccurrenceRead:
        return schedule_models.OccurrenceRead(
            entry_id=occurrence.entry_id,
            activity_id=occurrence.activity_id,
            activity_name=occurrence.activity_name,
            activity_color=occurrence.activity_color,
            start_utc=occurrence.start_utc,
            end_utc=occurrence.end_utc,
            start_local=to_zone(occurrence.start_utc, zone),
            end_local=to_zone(occurrence.end_utc, zone),
            time_range=format_time_range(occurrence.start_utc, occurrence.end_utc, zone),
            recurrence_type=occurrence.recurrence_type,
            recurrence_label=describe_recurrence(occurrence),
        )

    # --- Public Read Methods (API-Facing) ---

    async def get_day_for_api(
        self,
        current_user: db_models.Users,
        target_date: date,
        display_timezone: Optional[str] = None
    ) -> schedule_models.DayScheduleRead:
        """
        Ordered occurrences on `target_date`, rendered in `display_timezone`
        (defaults to the owner's own zone).
        """
        zone = resolve_zone(display_timezone or current_user.timezone)
        log.info(f"User {current_user.id} requesting day view for {target_date} in {zone.key}.")
        snapshot = await self.load_snapshot(current_user.id)
        occurrences = snapshot.occurrences_on_date(target_date)
        return schedule_models.DayScheduleRead(
            date=target_date,
            date_label=format_date(target_date),
            timezone=zone.key,
            occurrences=[self.format_occurrence(o, zone) for o in occurrences],
            skipped_records=snapshot.skipped_count,
        )

    async def get_month_for_api(
        self,
        current_user: db_models.Users,
        year_month: YearMonth
    ) -> schedule_models.MonthIndicatorsRead:
        log.info(f"User {current_user.id} requesting month indicators for {year_month}.")
        snapshot = await self.load_snapshot(current_user.id)
        return schedule_models.MonthIndicatorsRead(
            month=str(year_month),
            indicators=snapshot.month_indicators(year_month),
            skipped_records=snapshot.skipped_count,
        )

    async def list_entries_for_api(self, current_user: db_models.Users) -> list[schedule_models.ScheduleEntryRead]:
        snapshot = await self.load_snapshot(current_user.id)
        ordered = sorted(snapshot.entries, key=lambda e: (e.anchor_date, e.start_utc, e.id))
        return [schedule_models.ScheduleEntryRead.model_validate(entry) for entry in ordered]

    def build_share_link(self, owner_id: UUID, target_date: date) -> schedule_models.ShareLinkRead:
        """
        A share reference is just the owner id plus the calendar date.
        """
        base = settings.SHARE_BASE_URL.rstrip("/")
        url = f"{base}/share?userId={owner_id}&date={target_date.isoformat()}"
        return schedule_models.ShareLinkRead(owner_id=owner_id, date=target_date, url=url)

    # --- Public Write Methods (API-Facing) ---

    async def create_entry_for_api(
        self,
        data: schedule_models.ScheduleEntryCreate,
        current_user: db_models.Users
    ) -> schedule_models.ScheduleEntryRead:
        """
        Converts the wall-clock input from the owner's zone to UTC, validates
        the entry, snapshots the activity and stores it.
        """
        log.info(f"User {current_user.id} attempting to create a '{data.recurrence_type.value}' entry on {data.date}.")
        zone = resolve_zone(current_user.timezone)

        draft = ScheduleEntryDraft(
            activity_id=str(data.activity_id),
            anchor_date=data.date,
            start_utc=parse_wall_clock(data.date, data.start_time, zone),
            end_utc=parse_wall_clock(data.date, data.end_time, zone),
            recurrence_type=data.recurrence_type,
            recurrence_days=sorted(set(data.recurrence_days)),
            recurrence_start=data.recurrence_start_date,
            recurrence_end=data.recurrence_end_date,
        )
        activities = await self.activity_service.get_activities(current_user.id)
        entry_id = uuid.uuid4()
        entry = validate_new_entry(str(entry_id), draft, activities)

        new_row = db_models.ScheduleEntries(
            id=entry_id,
            owner_id=current_user.id,
            activity_id=UUID(entry.activity_id),
            activity_name=entry.activity_name,
            activity_color=entry.activity_color,
            start_utc=entry.start_utc,
            end_utc=entry.end_utc,
            anchor_date=entry.anchor_date,
            recurrence_type=entry.recurrence_type.value,
            recurrence_days=sorted(entry.recurrence_days),
            recurrence_start=entry.recurrence_start,
            recurrence_end=entry.recurrence_end,
        )
        self.db.add(new_row)
        await self._publish_on_commit(current_user.id)
        log.info(f"Created schedule entry {entry_id} for user {current_user.id}.")
        return schedule_models.ScheduleEntryRead.model_validate(entry)

    async def delete_entry(self, entry_id: UUID, current_user: db_models.Users) -> None:
        """
        Deletes one entry owned by the current user. Entries are never edited in place.
        """
        log.info(f"User {current_user.id} attempting to delete schedule entry {entry_id}.")
        row = await self.db.get(db_models.ScheduleEntries, entry_id)
        if row is None or row.owner_id != current_user.id:
            log.warning(f"Schedule entry {entry_id} not found for user {current_user.id}.")
            raise NotFoundError("Schedule entry", entry_id)

        await self.db.delete(row)
        await self._publish_on_commit(current_user.id)
        log.info(f"Deleted schedule entry {entry_id} for user {current_user.id}.")

