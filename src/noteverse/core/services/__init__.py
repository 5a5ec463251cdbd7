"""
Service layer interfaces and implementations.
"""

from .interfaces import IAuthService, IFileService, IHealthService, INoteService

from .auth_service import AuthService
from .file_service import FileStorageService
from .health_service import HealthService
from .note_service import NoteService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "IFileService",
    "IHealthService",

    # Implementations
    "AuthService",
    "NoteService",
    "FileStorageService",
    "HealthService",
]
