"""
Note visibility and ownership rules.

Every function here is a pure decision over ``(note, actor)`` where ``actor`` is
the requesting user's id or ``None`` for anonymous requests. The predicates
answer yes/no; the ``ensure_*`` guards raise the matching domain error.
"""

import uuid
from enum import Enum
from typing import Optional, Protocol

from .exceptions import Forbidden, Unauthorized


class NoteRecord(Protocol):
    is_public: bool
    author_id: uuid.UUID


class ListScope(str, Enum):
    """Visibility predicate applied to a listing."""

    OWNER_ALL = "owner_all"          # author listing their own notes, no predicate
    PUBLIC_OR_OWN = "public_or_own"  # is_public OR author_id == actor
    PUBLIC_ONLY = "public_only"      # is_public


def can_read(note: NoteRecord, actor: Optional[uuid.UUID]) -> bool:
    return bool(note.is_public) or (actor is not None and note.author_id == actor)


def can_modify(note: NoteRecord, actor: Optional[uuid.UUID]) -> bool:
    return actor is not None and note.author_id == actor


def ensure_readable(note: NoteRecord, actor: Optional[uuid.UUID]) -> None:
    if not can_read(note, actor):
        raise Forbidden("Not authorized to access this note")


def ensure_author(note: NoteRecord, actor: Optional[uuid.UUID]) -> None:
    """Write, delete and privacy toggle are reserved to the author."""
    if actor is None:
        raise Unauthorized("Authentication required")
    if note.author_id != actor:
        raise Forbidden("Not authorized to modify this note")


def ensure_can_like(note: NoteRecord, actor: Optional[uuid.UUID]) -> None:
    if actor is None:
        raise Unauthorized("Authentication required")
    ensure_readable(note, actor)


def list_scope(actor: Optional[uuid.UUID], author_id: Optional[uuid.UUID] = None) -> ListScope:
    """Pick the visibility predicate for a listing, optionally filtered by author."""
    if author_id is None:
        return ListScope.PUBLIC_OR_OWN if actor is not None else ListScope.PUBLIC_ONLY
    if actor is not None and actor == author_id:
        return ListScope.OWNER_ALL
    return ListScope.PUBLIC_ONLY


def is_visible_in_listing(
    note: NoteRecord,
    actor: Optional[uuid.UUID],
    author_id: Optional[uuid.UUID] = None,
) -> bool:
    """Whether ``note`` belongs in a listing requested by ``actor``.

    Mirrors the SQL the repository builds from ``list_scope``.
    """
    if author_id is not None and note.author_id != author_id:
        return False
    scope = list_scope(actor, author_id)
    if scope is ListScope.OWNER_ALL:
        return True
    if scope is ListScope.PUBLIC_OR_OWN:
        return can_read(note, actor)
    return bool(note.is_public)
