"""JWT token utilities."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..core.logging import get_logger
from ..core.redis_client import get_redis_client

logger = get_logger("security.jwt")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with JTI for Redis blacklisting."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    # Add JWT ID for blacklisting capability
    jti = str(uuid.uuid4())
    to_encode.update({"exp": expire, "type": "access", "jti": jti})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate access token, checking the blacklist when Redis is up."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    jti = payload.get("jti")
    redis_client = get_redis_client()
    if jti and redis_client.is_connected:
        if await redis_client.is_token_blacklisted(jti):
            return None

    return payload


async def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract user ID from token."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        return UUID(user_id)
    except ValueError:
        return None


async def blacklist_token(token: str) -> bool:
    """Add token to Redis blacklist for its remaining lifetime."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning(f"Refusing to blacklist undecodable token: {e}")
        return False

    jti = payload.get("jti")
    exp = payload.get("exp")
    if not jti or not exp:
        return False

    remaining_seconds = int(
        (datetime.fromtimestamp(exp, tz=timezone.utc) - datetime.now(timezone.utc)).total_seconds()
    )
    if remaining_seconds <= 0:
        return False

    return await get_redis_client().add_to_blacklist(jti, remaining_seconds)
