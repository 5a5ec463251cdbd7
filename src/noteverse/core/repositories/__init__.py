"""Repository layer for data access."""

from .user_repository import UserRepository
from .note_repository import NoteRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
]
