# Note model and its likes
import uuid
from typing import Any, Dict, List, TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy import event
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.orm import attributes as orm_attributes

from .base import BaseModel
from .types import GUID, FileRefListType

if TYPE_CHECKING:
    from .user import User


class Note(BaseModel):
    """Academic note filed under a branch, year and subject."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    branch: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[str] = mapped_column(String(1), nullable=False)
    subject: Mapped[str] = mapped_column(String(120), nullable=False)

    # attachment refs, {name, url, type, size}
    files: Mapped[List[Dict[str, Any]]] = mapped_column(FileRefListType, default=list, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    author: Mapped["User"] = relationship(
        "User",
        back_populates="notes",
        lazy="selectin",
        doc="User who created the note"
    )

    likes: Mapped[List["NoteLike"]] = relationship(
        "NoteLike",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        doc="One row per user that liked the note"
    )

    __table_args__ = (
        Index("idx_notes_author_id", "author_id"),
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_branch_year", "branch", "year"),
        Index("idx_notes_public_created", "is_public", "created_at"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
        CheckConstraint("year IN ('1', '2', '3', '4')", name="ck_notes_year"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', author_id={self.author_id})>"

    @validates("author_id")
    def _validate_author_id(self, key, value):
        current = self.__dict__.get("author_id")
        if current is not None and value != current:
            raise ValueError("author_id cannot be changed once set")
        return value

    @property
    def preview(self) -> str:
        """Get content preview."""
        if len(self.content) <= 150:
            return self.content
        return self.content[:147] + "..."

    @property
    def like_user_ids(self) -> List[uuid.UUID]:
        return [like.user_id for like in self.likes]

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def file_count(self) -> int:
        return len(self.files or [])

    def is_authored_by(self, user_id) -> bool:
        return user_id is not None and self.author_id == user_id

    def is_liked_by(self, user_id) -> bool:
        return user_id is not None and user_id in self.like_user_ids


class NoteLike(BaseModel):
    """A user's like on a note. At most one per (note, user)."""

    __tablename__ = "note_likes"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="likes")
    user: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "user_id", name="uq_note_likes_note_user"),
        Index("idx_note_likes_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteLike(note_id={self.note_id}, user_id={self.user_id})>"


# Ensure relationship collections are initialized to avoid implicit lazy loads
@event.listens_for(Note, "init", propagate=True)
def _init_note_collections(target, args, kwargs):
    if "likes" not in kwargs:
        orm_attributes.set_committed_value(target, "likes", [])
    if "files" not in kwargs:
        target.files = []
    if "is_public" not in kwargs:
        target.is_public = True
