"""Authentication dependencies.

Requests without a Bearer token resolve to an anonymous actor (``None``);
other Authorization schemes are ignored. A presented but invalid Bearer
token is always rejected.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import Unauthorized
from ..security import get_user_id_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication resolving to an optional user id."""

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> Optional[UUID]:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            return None

        user_id = await get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise Unauthorized("Invalid or expired token")

        return user_id


jwt_bearer = JWTBearer()


async def get_optional_user_id(user_id: Optional[UUID] = Depends(jwt_bearer)) -> Optional[UUID]:
    """Current user ID, or None for anonymous requests."""
    return user_id


async def get_current_user_id(user_id: Optional[UUID] = Depends(jwt_bearer)) -> UUID:
    """Get current authenticated user ID."""
    if user_id is None:
        raise Unauthorized("Not authorized, no token")
    return user_id


async def get_bearer_token(
    user_id: UUID = Depends(get_current_user_id),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
) -> str:
    """Raw token of an authenticated request (used for logout)."""
    return credentials.credentials
