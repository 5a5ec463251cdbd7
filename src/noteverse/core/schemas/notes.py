"""
Note management schemas.

These schemas define the API contracts for note CRUD, listing filters,
likes/privacy toggles and the branch/year catalog.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PaginationResponse

if TYPE_CHECKING:
    from ..models.note import Note

ALL = "all"  # "no filter" sentinel used by clients

YearValue = Literal["1", "2", "3", "4"]


class Branch(str, Enum):
    """Academic branch a note is filed under."""

    CS = "cs"
    IT = "it"
    EE = "ee"
    ECE = "ece"
    ETE = "ete"
    ME = "me"
    PROD = "prod"
    TEXTILE = "textile"
    CE = "ce"
    CHEM = "chem"


BRANCH_NAMES = {
    Branch.CS: "Computer Science",
    Branch.IT: "Information Technology",
    Branch.EE: "Electrical Engineering",
    Branch.ECE: "Electronics and Communication Engineering",
    Branch.ETE: "Electronics and Telecommunication Engineering",
    Branch.ME: "Mechanical Engineering",
    Branch.PROD: "Production Engineering",
    Branch.TEXTILE: "Textile Engineering",
    Branch.CE: "Civil Engineering",
    Branch.CHEM: "Chemical Engineering",
}

YEAR_NAMES = {
    "1": "First Year",
    "2": "Second Year",
    "3": "Third Year",
    "4": "Fourth Year",
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _year_to_str(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class FileRef(BaseModel):
    """Reference to an uploaded attachment."""

    name: str = Field(min_length=1, max_length=255, description="Original file name")
    url: str = Field(min_length=1, max_length=500, description="Where the file is served from")
    type: str = Field(min_length=1, max_length=100, description="MIME type")
    size: int = Field(ge=0, description="Size in bytes")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "dsa-unit1.pdf",
                "url": "/uploads/file-1726221000000-482913.pdf",
                "type": "application/pdf",
                "size": 482133,
            }
        }
    )


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(min_length=1, description="Note body")
    branch: Branch = Field(description="Academic branch")
    year: YearValue = Field(description="Year of study, 1 to 4")
    subject: str = Field(min_length=1, max_length=120, description="Subject name")
    files: List[FileRef] = Field(default_factory=list, max_length=20, description="Attachments")
    is_public: bool = Field(default=True, description="Whether note is publicly visible")

    @field_validator("title", "subject", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("year", mode="before")
    @classmethod
    def normalize_year(cls, v):
        return _year_to_str(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        """Validate content length."""
        if len(v.strip()) == 0:
            raise ValueError("Content cannot be empty")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Data Structures and Algorithms",
                "content": "Arrays, linked lists, stacks and queues with complexity analysis.",
                "branch": "cs",
                "year": "2",
                "subject": "Data Structures",
                "files": [],
                "is_public": True,
            }
        }
    )


class NoteUpdate(NoteCreate):
    """Note update request schema. Same rules as create; privacy left alone when omitted."""

    is_public: Optional[bool] = Field(default=None, description="Whether note is publicly visible")


class NoteListQuery(BaseModel):
    """Filters and paging for the note listing."""

    branch: Optional[Branch] = Field(default=None, description="Exact branch, or 'all'")
    year: Optional[YearValue] = Field(default=None, description="Exact year, or 'all'")
    subject: Optional[str] = Field(default=None, max_length=120, description="Subject contains")
    search: Optional[str] = Field(default=None, max_length=200, description="Title, content or subject contains")
    author_id: Optional[uuid.UUID] = Field(default=None, description="Only notes by this author")
    liked: bool = Field(default=False, description="Only notes the caller has liked")

    page: int = Field(default=1, ge=1, description="Page number")
    per_page: int = Field(default=20, ge=1, le=100, description="Items per page")

    @field_validator("branch", "year", mode="before")
    @classmethod
    def drop_all_sentinel(cls, v):
        if v is None or (isinstance(v, str) and v.strip().lower() in ("", ALL)):
            return None
        return _year_to_str(v)

    @field_validator("subject", "search", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class AuthorInfo(BaseModel):
    """Public identity of a note author or liker."""

    id: uuid.UUID = Field(description="User ID")
    username: str = Field(description="Username")
    email: str = Field(description="Email address")

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(BaseModel):
    """Note detail response schema."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    is_public: bool = Field(description="Whether note is publicly visible")
    branch: Branch = Field(description="Academic branch")
    year: YearValue = Field(description="Year of study")
    subject: str = Field(description="Subject name")
    files: List[FileRef] = Field(description="Attachments")

    author_id: uuid.UUID = Field(description="Note author ID")
    author: Optional[AuthorInfo] = Field(default=None, description="Note author")

    likes: List[uuid.UUID] = Field(description="IDs of users who liked the note")
    like_count: int = Field(description="Number of likes")
    liked_by: List[AuthorInfo] = Field(default_factory=list, description="Users who liked the note")
    liked_by_me: bool = Field(description="Whether the caller liked the note")
    can_edit: bool = Field(description="Whether the caller can edit this note")

    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v):
        return _as_utc(v)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Data Structures and Algorithms",
                "content": "Arrays, linked lists, stacks and queues.",
                "is_public": True,
                "branch": "cs",
                "year": "2",
                "subject": "Data Structures",
                "files": [],
                "author_id": "456e7890-e89b-12d3-a456-426614174000",
                "author": {
                    "id": "456e7890-e89b-12d3-a456-426614174000",
                    "username": "john_doe",
                    "email": "john@example.com",
                },
                "likes": [],
                "like_count": 0,
                "liked_by": [],
                "liked_by_me": False,
                "can_edit": True,
                "created_at": "2025-09-13T10:30:00Z",
                "updated_at": "2025-09-13T11:00:00Z",
            }
        },
    )

    @classmethod
    def from_note(cls, note: "Note", actor: Optional[uuid.UUID]) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            is_public=note.is_public,
            branch=note.branch,
            year=note.year,
            subject=note.subject,
            files=note.files or [],
            author_id=note.author_id,
            author=AuthorInfo.model_validate(note.author) if note.author else None,
            likes=note.like_user_ids,
            like_count=note.like_count,
            liked_by=[AuthorInfo.model_validate(like.user) for like in note.likes if like.user],
            liked_by_me=note.is_liked_by(actor),
            can_edit=note.is_authored_by(actor),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListItem(BaseModel):
    """Simplified note schema for list views."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content_preview: str = Field(description="Content preview (first 150 chars)")
    is_public: bool = Field(description="Whether note is publicly visible")
    branch: Branch = Field(description="Academic branch")
    year: YearValue = Field(description="Year of study")
    subject: str = Field(description="Subject name")

    author_id: uuid.UUID = Field(description="Note author ID")
    author: Optional[AuthorInfo] = Field(default=None, description="Note author")
    like_count: int = Field(description="Number of likes")
    liked_by_me: bool = Field(description="Whether the caller liked the note")
    file_count: int = Field(description="Number of attachments")
    can_edit: bool = Field(description="Whether the caller can edit this note")

    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v):
        return _as_utc(v)

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_note(cls, note: "Note", actor: Optional[uuid.UUID]) -> "NoteListItem":
        return cls(
            id=note.id,
            title=note.title,
            content_preview=note.preview,
            is_public=note.is_public,
            branch=note.branch,
            year=note.year,
            subject=note.subject,
            author_id=note.author_id,
            author=AuthorInfo.model_validate(note.author) if note.author else None,
            like_count=note.like_count,
            liked_by_me=note.is_liked_by(actor),
            file_count=note.file_count,
            can_edit=note.is_authored_by(actor),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListResponse(PaginationResponse[NoteListItem]):
    """Paginated note list response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "total": 50,
                "page": 1,
                "per_page": 20,
                "pages": 3,
                "has_next": True,
                "has_prev": False,
            }
        }
    )


class CatalogEntry(BaseModel):
    """Selectable branch or year."""

    id: str = Field(description="Value used in notes and filters")
    name: str = Field(description="Display name")


def branch_catalog() -> List[CatalogEntry]:
    return [CatalogEntry(id=branch.value, name=name) for branch, name in BRANCH_NAMES.items()]


def year_catalog() -> List[CatalogEntry]:
    return [CatalogEntry(id=year, name=name) for year, name in YEAR_NAMES.items()]
