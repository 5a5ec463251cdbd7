"""
Database models for the NoteVerse application.

SQLAlchemy ORM models defining the schema of the note sharing platform.
All models are designed for async sessions.

Models included:
    - User: student account, email/password login
    - Note: note content filed under branch/year/subject with attachments
    - NoteLike: one row per (note, user) like
"""

from .base import BaseModel
from .note import Note, NoteLike
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "NoteLike",
]
