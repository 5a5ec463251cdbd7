"""Authentication service implementation."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import (
    blacklist_token,
    create_access_token,
    hash_password,
    needs_update,
    verify_password,
)
from ..exceptions import NotFound, Unauthorized, ValidationError
from ..logging import get_logger
from ..models.user import User
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .interfaces import IAuthService

logger = get_logger("services.auth")


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.note_repo = NoteRepository(session)
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> TokenResponse:
        """Register new user and issue their first token."""
        email = User.normalize_email(request.email)
        if await self.user_repo.is_email_taken(email):
            raise ValidationError.single("email", "User already exists")

        user_data = {
            "username": request.username,
            "email": email,
            "password_hash": hash_password(request.password),
        }
        user = await self.user_repo.create_user(user_data)

        logger.info("User registered", extra={"user_id": str(user.id)})
        return self._token_response(user)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not verify_password(request.password, user.password_hash):
            logger.info("Failed login attempt")
            raise Unauthorized("Invalid email or password")

        # hashes made with older cost settings are upgraded while we have the plaintext
        if needs_update(user.password_hash):
            await self.user_repo.update_password_hash(user, hash_password(request.password))

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return self._token_response(user)

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        response = UserResponse.model_validate(user)
        response.notes_count = await self.note_repo.count_by_author(user.id)
        return response

    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Blacklist the access token for the rest of its lifetime."""
        revoked = await blacklist_token(access_token)
        if not revoked:
            logger.warning("Token not blacklisted on logout", extra={"user_id": str(user_id)})
        return revoked

    def _token_response(self, user: User) -> TokenResponse:
        access_token = create_access_token(data={"sub": str(user.id)})
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )
