'''
Owner accounts: lookup, signup and profile (display name / time zone).
'''
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.config import settings
from ..common.exceptions import NotFoundError
from ..common.logger import log
from ..common.security_utils import HashedPassword
from ..core.time_format import resolve_zone
from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import user as user_models


class UserService:
    """
    Base service for user-related business logic.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> Optional[db_models.Users]:
        log.info(f"Fetching user by ID: {user_id}")
        return await self.db.get(db_models.Users, user_id)

    async def get_user_by_id_or_raise(self, user_id: UUID) -> db_models.Users:
        user = await self.get_user_by_id(user_id)
        if user is None or not user.is_active:
            log.warning(f"Tried to fetch non-existing or inactive user: {user_id}")
            raise NotFoundError("User", user_id)
        return user

    async def _get_user_by_email_with_password(self, email: str) -> Optional[db_models.Users]:
        """
        Internal fetch used by login. Returns the full row, password hash included.
        """
        stmt = select(db_models.Users).filter(db_models.Users.email == email.lower())
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_user_by_email(self, email: str) -> Optional[db_models.Users]:
        log.info(f"Fetching user by email: {email}")
        return await self._get_user_by_email_with_password(email)

    async def create_user(self, data: user_models.UserCreate, detected_timezone: Optional[str] = None) -> db_models.Users:
        """
        Creates a new owner account.
        Time zone precedence: explicit payload value, then the detected zone, then DEFAULT_TIMEZONE.
        """
        email = data.email.lower()
        log.info(f"Attempting to create user {email}.")

        if await self._get_user_by_email_with_password(email):
            log.warning(f"Signup rejected, email already registered: {email}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered.")

        if data.timezone:
            timezone_name = resolve_zone(data.timezone, strict=True).key
        elif detected_timezone:
            timezone_name = resolve_zone(detected_timezone).key
        else:
            timezone_name = settings.DEFAULT_TIMEZONE

        new_user = db_models.Users(
            email=email,
            password=HashedPassword.get_hash(data.password),
            display_name=data.display_name or email.split("@")[0] or email,
            timezone=timezone_name,
            is_active=True,
        )
        self.db.add(new_user)
        await self.db.flush()
        log.info(f"Created user {new_user.id} ({email}) in time zone {timezone_name}.")
        return new_user

    async def update_profile(self, current_user: db_models.Users, data: user_models.UserUpdate) -> db_models.Users:
        """
        Updates the display name and/or time zone of the current user.
        Unknown time zones are rejected rather than silently replaced.
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields provided to update.")

        if "timezone" in update_data:
            update_data["timezone"] = resolve_zone(update_data["timezone"], strict=True).key

        for key, value in update_data.items():
            setattr(current_user, key, value)

        self.db.add(current_user)
        await self.db.flush()
        log.info(f"User {current_user.id} updated profile fields: {list(update_data)}")
        return current_user
