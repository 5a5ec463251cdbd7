"""
User model for authentication.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, Index, String, event
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import attributes as orm_attributes
from sqlalchemy.orm import mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .note import Note


class User(BaseModel):
    """Student account, identified by email for login."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("length(username) <= 50", name="ck_users_username_len"),
        Index("idx_users_email", "email"),
        Index("idx_users_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"

    @classmethod
    def normalize_email(cls, email: str) -> str:
        return email.strip().lower()


@event.listens_for(User, "init", propagate=True)
def _init_user_collections(target, args, kwargs):
    # avoid an implicit async lazy load on a freshly created user
    if "notes" not in kwargs:
        orm_attributes.set_committed_value(target, "notes", [])
