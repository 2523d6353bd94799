'''
Login and signup.
'''
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from .security import HashedPassword, JWTHandler
from .user_service import UserService
from .geo_service import GeoService
from ..database import models as db_models
from ..models import token as token_models
from ..models import user as user_models
from ..common.logger import log

class LoginService:
    """
    Service for handling user login and signup.
    Depends on the UserService to fetch and create user rows.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)],
        geo_service: Annotated[GeoService, Depends(GeoService)]
    ):
        self.user_service = user_service
        self.geo_service = geo_service

    async def login_user(self, form_data: OAuth2PasswordRequestForm) -> token_models.Token:
        log.info(f"Attempting login for user: {form_data.username}")

        user = await self.user_service._get_user_by_email_with_password(form_data.username)

        if not user or not HashedPassword.verify(form_data.password, user.password):
            log.warning(f"Login failed for user: {form_data.username} - Incorrect email or password")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            log.warning(f"Login failed for user: {form_data.username} - User is inactive.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user."
            )

        access_token = JWTHandler.create_access_token(owner_id=user.id)
        log.info(f"Login successful for user: {form_data.username}")

        return token_models.Token(access_token=access_token, token_type="bearer")

    async def signup_user(self, data: user_models.UserCreate, ip_address: Optional[str] = None) -> db_models.Users:
        """
        Creates an account. The IP lookup only runs when no time zone was supplied.
        """
        detected_timezone = None
        if not data.timezone:
            detected_timezone = await self.geo_service.get_timezone(ip_address)
        return await self.user_service.create_user(data, detected_timezone=detected_timezone)
