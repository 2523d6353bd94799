'''
Read-only shared view of someone's day.
'''
from datetime import date
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends

from ..common.logger import log
from ..core.time_format import format_date, resolve_zone
from ..models import schedule as schedule_models
from .schedule_service import ScheduleService
from .user_service import UserService


class ShareService:
    """
    Resolves a share reference (owner id + calendar date). Needs nothing but
    read access to the owner's entries; the viewer does not have to be logged in.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)]
    ):
        self.user_service = user_service
        self.schedule_service = schedule_service

    async def get_shared_day(
        self,
        owner_id: UUID,
        target_date: date,
        viewer_timezone: Optional[str] = None
    ) -> schedule_models.SharedScheduleRead:
        """
        The owner's occurrences on `target_date`, rendered in the viewer's zone
        (the owner's zone when the viewer did not pick one).
        """
        owner = await self.user_service.get_user_by_id_or_raise(owner_id)
        zone = resolve_zone(viewer_timezone or owner.timezone)
        log.info(f"Resolving shared schedule of {owner_id} for {target_date} in {zone.key}.")

        snapshot = await self.schedule_service.load_snapshot(owner.id)
        occurrences = snapshot.occurrences_on_date(target_date)

        return schedule_models.SharedScheduleRead(
            owner_id=owner.id,
            owner_display_name=owner.display_name or "Shared User",
            owner_timezone=owner.timezone,
            viewer_timezone=zone.key,
            date=target_date,
            date_label=format_date(target_date),
            occurrences=[self.schedule_service.format_occurrence(o, zone) for o in occurrences],
            skipped_records=snapshot.skipped_count,
        )
