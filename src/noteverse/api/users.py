"""User profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import UserResponse
from ..core.services import AuthService
from ..database import get_db_session

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, session: AsyncSession = Depends(get_db_session)):
    """Public profile of a user."""
    auth_service = AuthService(session)
    return await auth_service.get_current_user(user_id)
