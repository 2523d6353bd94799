'''
API endpoints for schedule entries and the day / month views.
'''
from datetime import date
from typing import Annotated, Any, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..core.recurrence import YearMonth
from ..database import models as db_models
from ..models import schedule as schedule_models
from ..services.security import verify_token_and_get_user
from ..services.schedule_service import ScheduleService


class SchedulesAPI:
    """
    A class to encapsulate endpoints for the owner's schedule.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/schedules",
            tags=["Schedules"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/",
                self.list_entries,
                methods=["GET"],
                response_model=List[schedule_models.ScheduleEntryRead])

        self.router.add_api_route(
                "/",
                self.create_entry,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=schedule_models.ScheduleEntryRead)

        self.router.add_api_route(
                "/day",
                self.get_day,
                methods=["GET"],
                response_model=schedule_models.DayScheduleRead)

        self.router.add_api_route(
                "/month",
                self.get_month,
                methods=["GET"],
                response_model=schedule_models.MonthIndicatorsRead)

        self.router.add_api_route(
                "/share-link",
                self.get_share_link,
                methods=["GET"],
                response_model=schedule_models.ShareLinkRead)

        self.router.add_api_route(
                "/{entry_id}",
                self.delete_entry,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def list_entries(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)]
    ) -> List[Any]:
        """
        Lists all stored entries (one-time and recurring) of the current user.
        """
        return await schedule_service.list_entries_for_api(current_user)

    async def create_entry(
        self,
        entry_data: schedule_models.ScheduleEntryCreate,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)]
    ) -> Any:
        """
        Places an activity on the calendar, once or recurring.
        """
        return await schedule_service.create_entry_for_api(entry_data, current_user)

    async def get_day(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)],
        target_date: Annotated[date, Query(alias="date", description="Calendar date, YYYY-MM-DD")],
        tz: Annotated[str | None, Query(description="Display time zone, defaults to the user's own")] = None
    ) -> Any:
        """
        Occurrences on one date, ordered by start time.
        """
        return await schedule_service.get_day_for_api(current_user, target_date, display_timezone=tz)

    async def get_month(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)],
        month: Annotated[str, Query(description="Month, YYYY-MM")]
    ) -> Any:
        """
        Per-day color indicators for a whole month.
        """
        try:
            year_month = YearMonth.parse(month)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return await schedule_service.get_month_for_api(current_user, year_month)

    async def get_share_link(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)],
        target_date: Annotated[date, Query(alias="date", description="Calendar date, YYYY-MM-DD")]
    ) -> Any:
        """
        Builds a read-only link to the current user's schedule for one date.
        """
        return schedule_service.build_share_link(current_user.id, target_date)

    async def delete_entry(
        self,
        entry_id: UUID,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        schedule_service: Annotated[ScheduleService, Depends(ScheduleService)]
    ):
        """
        Deletes one entry (and with it every occurrence of a recurring entry).
        """
        await schedule_service.delete_entry(entry_id, current_user)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
schedules_api = SchedulesAPI()
router = schedules_api.router
