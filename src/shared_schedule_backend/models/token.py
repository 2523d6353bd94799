'''
Token API Models
'''
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Claims of an owner's access token; `sub` is the owner id."""
    sub: Optional[UUID] = None
    type: str = "access"
