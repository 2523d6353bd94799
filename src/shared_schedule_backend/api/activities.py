'''
API endpoints for managing Activities.
'''
from typing import Annotated, Any, List
from uuid import UUID
from fastapi import APIRouter, Depends, status, Response

from ..database import models as db_models
from ..models import activity as activity_models
from ..services.security import verify_token_and_get_user
from ..services.activity_service import ActivityService

class ActivitiesAPI:
    """
    A class to encapsulate endpoints for Activities.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/activities",
            tags=["Activities"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/",
                self.list_activities,
                methods=["GET"],
                response_model=List[activity_models.ActivityRead])

        self.router.add_api_route(
                "/",
                self.create_activity,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=activity_models.ActivityRead)

        self.router.add_api_route(
                "/{activity_id}",
                self.delete_activity,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def list_activities(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        activity_service: Annotated[ActivityService, Depends(ActivityService)]
    ) -> List[Any]:
        """
        Lists the current user's activities.
        """
        return await activity_service.list_activities_for_api(current_user)

    async def create_activity(
        self,
        activity_data: activity_models.ActivityCreate,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        activity_service: Annotated[ActivityService, Depends(ActivityService)]
    ) -> Any:
        """
        Creates a new activity for the current user.
        """
        return await activity_service.create_activity_for_api(activity_data, current_user)

    async def delete_activity(
        self,
        activity_id: UUID,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        activity_service: Annotated[ActivityService, Depends(ActivityService)]
    ):
        """
        Deletes an activity. Existing schedule entries keep their copy of its name and color.
        """
        await activity_service.delete_activity(activity_id, current_user)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
activities_api = ActivitiesAPI()
router = activities_api.router
