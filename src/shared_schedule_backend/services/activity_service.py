'''
Service for an owner's activities (the reusable categories placed on the calendar).
'''
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.exceptions import NotFoundError
from ..common.logger import log
from ..core.entries import Activity
from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import activity as activity_models


class ActivityService:
    """
    CRUD for activities. Activities are always scoped to their owner; there
    is no cross-owner access.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    async def _get_activities_orm(self, owner_id: UUID) -> list[db_models.Activities]:
        stmt = select(db_models.Activities).filter(
            db_models.Activities.owner_id == owner_id
        ).order_by(db_models.Activities.name, db_models.Activities.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_activities(self, owner_id: UUID) -> list[Activity]:
        """Owner's activities as engine records."""
        return [Activity.model_validate(row) for row in await self._get_activities_orm(owner_id)]

    async def list_activities_for_api(self, current_user: db_models.Users) -> list[activity_models.ActivityRead]:
        log.info(f"User {current_user.id} listing activities.")
        rows = await self._get_activities_orm(current_user.id)
        return [activity_models.ActivityRead.model_validate(row) for row in rows]

    async def create_activity_for_api(
        self,
        data: activity_models.ActivityCreate,
        current_user: db_models.Users
    ) -> activity_models.ActivityRead:
        log.info(f"User {current_user.id} creating activity '{data.name}'.")
        new_activity = db_models.Activities(
            owner_id=current_user.id,
            name=data.name,
            color=data.color,
        )
        self.db.add(new_activity)
        await self.db.flush()
        return activity_models.ActivityRead.model_validate(new_activity)

    async def delete_activity(self, activity_id: UUID, current_user: db_models.Users) -> None:
        """
        Deletes an activity. Schedule entries that reference it are kept and
        continue to show the name/color they were created with.
        """
        log.info(f"User {current_user.id} attempting to delete activity {activity_id}.")
        activity = await self.db.get(db_models.Activities, activity_id)
        if activity is None or activity.owner_id != current_user.id:
            log.warning(f"Activity {activity_id} not found for user {current_user.id}.")
            raise NotFoundError("Activity", activity_id)
        await self.db.delete(activity)
        await self.db.flush()
