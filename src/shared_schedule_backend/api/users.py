'''
API endpoints for the current user's profile.
'''
from typing import Annotated, Any
from fastapi import APIRouter, Depends

from ..core.time_format import COMMON_TIME_ZONES
from ..database import models as db_models
from ..models import user as user_models
from ..services.security import verify_token_and_get_user
from ..services.user_service import UserService


class UsersAPI:
    """
    A class to encapsulate profile endpoints.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/users",
            tags=["Users"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/me",
            self.get_me,
            methods=["GET"],
            response_model=user_models.UserRead)

        self.router.add_api_route(
            "/me",
            self.update_me,
            methods=["PATCH"],
            response_model=user_models.UserRead)

        self.router.add_api_route(
            "/time-zones",
            self.list_time_zones,
            methods=["GET"],
            response_model=list[str])

    async def get_me(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)]
    ) -> Any:
        """Returns the logged-in user's profile."""
        return user_models.UserRead.model_validate(current_user)

    async def update_me(
        self,
        user_data: user_models.UserUpdate,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ) -> Any:
        """Updates display name and/or time zone."""
        updated = await user_service.update_profile(current_user, user_data)
        return user_models.UserRead.model_validate(updated)

    async def list_time_zones(self) -> list[str]:
        """Zones offered in the time zone picker. Any IANA name is accepted."""
        return COMMON_TIME_ZONES

# Instantiate the class and export its router
users_api = UsersAPI()
router = users_api.router
