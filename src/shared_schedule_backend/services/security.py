'''
Bearer tokens for schedule owners.

Tokens carry the owner's id as subject. Shared views never need one; every
other endpoint resolves its owner through `verify_token_and_get_user`.
'''
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional
from uuid import UUID
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from ..common.config import settings
from ..common.logger import log
from ..common.security_utils import HashedPassword
from ..database import models as db_models
from ..models.token import TokenPayload
from .user_service import UserService

__all__ = ["HashedPassword", "JWTHandler", "oauth2_scheme", "verify_token_and_get_user"]

ACCESS_TOKEN_TYPE = "access"


class JWTHandler:
    @staticmethod
    def create_access_token(owner_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
        issued_at = datetime.now(timezone.utc)
        lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        claims = {
            "sub": str(owner_id),
            "type": ACCESS_TOKEN_TYPE,
            "iat": issued_at,
            "exp": issued_at + lifetime,
        }
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> TokenPayload | None:
        """Returns the token's claims, or None if it is expired, forged or not an access token."""
        try:
            claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
            payload = TokenPayload(**claims)
        except (JWTError, ValueError) as e:
            log.warning(f"Rejected bearer token: {e}")
            return None

        if payload.type != ACCESS_TOKEN_TYPE:
            log.warning(f"Rejected bearer token of type '{payload.type}'.")
            return None
        return payload


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

async def verify_token_and_get_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    user_service: Annotated[UserService, Depends(UserService)]
) -> db_models.Users:
    """
    Resolves the bearer token to an active owner, or answers 401.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = JWTHandler.decode_token(token)
    if payload is None or payload.sub is None:
        raise unauthorized

    owner = await user_service.get_user_by_id(payload.sub)
    if owner is None or not owner.is_active:
        log.warning(f"Token subject {payload.sub} is unknown or inactive.")
        raise unauthorized

    return owner
