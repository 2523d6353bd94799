'''
User API Models
'''
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    """
    Pydantic model for reading user data.
    Corresponds to the db_models.Users ORM model.
    """
    id: UUID
    email: str
    display_name: str
    timezone: str

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """
    Payload for signing up.
    When 'timezone' is omitted it is detected from the request IP.
    When 'display_name' is omitted the local part of the email is used.
    """
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=72)
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    timezone: Optional[str] = None


class UserUpdate(BaseModel):
    """
    Payload for PATCH /users/me. All fields optional.
    """
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    timezone: Optional[str] = None
