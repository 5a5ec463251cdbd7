"""API routers for NoteVerse."""

from .auth import router as auth_router
from .catalog import router as catalog_router
from .files import router as files_router
from .health import router as health_router
from .notes import router as notes_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "notes_router",
    "files_router",
    "users_router",
    "catalog_router",
    "health_router",
]
