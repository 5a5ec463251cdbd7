"""
Pydantic schemas for validating and documenting API requests and responses.

This package exposes the Pydantic models used across the application to
define input/output contracts for authentication, notes, attachments and
common responses (pagination and error formats).
"""

from .auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .common import ErrorResponse, FieldError, PaginationResponse, SuccessResponse
from .files import StoredFile
from .notes import (
    AuthorInfo,
    Branch,
    CatalogEntry,
    FileRef,
    NoteCreate,
    NoteListItem,
    NoteListQuery,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)

__all__ = [
    # Auth schemas
    "LoginRequest",
    "TokenResponse",
    "RegisterRequest",
    "UserResponse",
    # Note schemas
    "Branch",
    "FileRef",
    "NoteCreate",
    "NoteUpdate",
    "NoteListQuery",
    "NoteResponse",
    "NoteListItem",
    "NoteListResponse",
    "AuthorInfo",
    "CatalogEntry",
    # File schemas
    "StoredFile",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "FieldError",
    "SuccessResponse",
]
