"""
Service interfaces for the NoteVerse application.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID

from ..schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from ..schemas.common import HealthCheckResponse
from ..schemas.files import StoredFile
from ..schemas.notes import NoteCreate, NoteListQuery, NoteListResponse, NoteResponse, NoteUpdate

NotePayload = Union[Mapping[str, Any], NoteCreate]
ListPayload = Union[Mapping[str, Any], NoteListQuery, None]


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> TokenResponse:
        """Register new user and sign them in."""
        pass

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""
        pass

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        pass

    @abstractmethod
    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Logout user."""
        pass


class INoteService(ABC):
    """Note service for CRUD operations and toggles.

    ``actor`` is the requesting user's id, or None when anonymous.
    """

    @abstractmethod
    async def create_note(self, actor: Optional[UUID], data: NotePayload) -> NoteResponse:
        """Create new note authored by actor."""
        pass

    @abstractmethod
    async def get_note(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Get note by ID if actor may read it."""
        pass

    @abstractmethod
    async def list_notes(self, actor: Optional[UUID], params: ListPayload = None) -> NoteListResponse:
        """List notes visible to actor."""
        pass

    @abstractmethod
    async def update_note(
        self, actor: Optional[UUID], note_id: UUID, data: Union[Mapping[str, Any], NoteUpdate]
    ) -> NoteResponse:
        """Replace note fields. Author only."""
        pass

    @abstractmethod
    async def delete_note(self, actor: Optional[UUID], note_id: UUID) -> None:
        """Delete note. Author only."""
        pass

    @abstractmethod
    async def toggle_like(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Add or remove actor from the note's likes."""
        pass

    @abstractmethod
    async def toggle_privacy(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Flip is_public. Author only."""
        pass


class IFileService(ABC):
    """Attachment storage."""

    @abstractmethod
    async def read_upload(self, upload, chunk_size: int = 64 * 1024) -> bytes:
        """Read an upload without buffering more than the size limit."""
        pass

    @abstractmethod
    async def store(self, data: bytes, original_name: str, content_type: str) -> StoredFile:
        """Persist an upload and return its reference."""
        pass

    @abstractmethod
    def resolve(self, filename: str):
        """Path of a stored file."""
        pass

    @abstractmethod
    async def delete(self, filename: str) -> None:
        """Remove a stored file."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check database connectivity."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connectivity."""
        pass
