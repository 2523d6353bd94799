'''
Activity API Models
'''
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ActivityCreate(BaseModel):
    """
    Payload for creating an activity.
    The color is carried through untouched (any CSS-like color string).
    """
    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field("#000000", min_length=1, max_length=32)

    model_config = ConfigDict(str_strip_whitespace=True)


class ActivityRead(BaseModel):
    id: UUID
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)
