'''
Public, read-only endpoint behind share links.
'''
from datetime import date
from typing import Annotated, Any
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from ..models import schedule as schedule_models
from ..services.share_service import ShareService


class ShareAPI:
    """
    A class to encapsulate the shared schedule view.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/share",
            tags=["Share"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/{owner_id}",
            self.get_shared_day,
            methods=["GET"],
            response_model=schedule_models.SharedScheduleRead)

    async def get_shared_day(
        self,
        owner_id: UUID,
        share_service: Annotated[ShareService, Depends(ShareService)],
        target_date: Annotated[date, Query(alias="date", description="Calendar date, YYYY-MM-DD")],
        tz: Annotated[str | None, Query(description="Viewer time zone, defaults to the owner's")] = None
    ) -> Any:
        """
        Someone's schedule for one date, rendered in the viewer's time zone.
        """
        return await share_service.get_shared_day(owner_id, target_date, viewer_timezone=tz)

# Instantiate the class and export its router
share_api = ShareAPI()
router = share_api.router
