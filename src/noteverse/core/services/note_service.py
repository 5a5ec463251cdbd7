"""Note service implementation."""

from typing import Any, Mapping, Optional, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..access import ensure_author, ensure_can_like, ensure_readable, list_scope
from ..exceptions import NotFound, Unauthorized, ValidationError, field_errors_from_pydantic
from ..logging import get_logger
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import (
    NoteCreate,
    NoteListItem,
    NoteListQuery,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from .interfaces import INoteService, ListPayload, NotePayload

logger = get_logger("services.note")

M = TypeVar("M", bound=BaseModel)


def validate_payload(model: Type[M], data: Any) -> M:
    """Validate ``data`` against ``model``, reporting every violation at once."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors_from_pydantic(exc.errors())) from exc


class NoteService(INoteService):
    """Note CRUD plus like and privacy toggles, all gated by the access rules."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)

    async def create_note(self, actor: Optional[UUID], data: NotePayload) -> NoteResponse:
        """Create new note."""
        if actor is None:
            raise Unauthorized("Authentication required")
        request = validate_payload(NoteCreate, data)

        note_data = {
            "title": request.title,
            "content": request.content,
            "is_public": request.is_public,
            "branch": request.branch.value,
            "year": request.year,
            "subject": request.subject,
            "files": [f.model_dump() for f in request.files],
            "author_id": actor,
        }
        note = await self.note_repo.create_note(note_data)

        logger.info(
            "Note created",
            extra={"note_id": str(note.id), "author_id": str(actor), "is_public": note.is_public},
        )
        return NoteResponse.from_note(note, actor)

    async def get_note(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Get note by ID.

        Public notes are readable by anyone, private ones only by their author.
        A private note requested by someone else is reported as forbidden, not missing.
        """
        note = await self._get_existing(note_id)
        ensure_readable(note, actor)
        return NoteResponse.from_note(note, actor)

    async def list_notes(self, actor: Optional[UUID], params: ListPayload = None) -> NoteListResponse:
        """List notes visible to actor, newest first."""
        query = validate_payload(NoteListQuery, params if params is not None else {})
        if query.liked and actor is None:
            raise Unauthorized("Authentication required to list liked notes")

        scope = list_scope(actor, query.author_id)
        notes, total_count = await self.note_repo.list_notes(
            scope,
            actor=actor,
            author_id=query.author_id,
            branch=query.branch.value if query.branch else None,
            year=query.year,
            subject=query.subject,
            search=query.search,
            liked_by=actor if query.liked else None,
            page=query.page,
            per_page=query.per_page,
        )

        items = [NoteListItem.from_note(note, actor) for note in notes]
        return NoteListResponse.create(
            items=items, total=total_count, page=query.page, per_page=query.per_page
        )

    async def update_note(
        self,
        actor: Optional[UUID],
        note_id: UUID,
        data: Union[Mapping[str, Any], NoteUpdate],
    ) -> NoteResponse:
        """Replace the note's content fields. Privacy only changes when given."""
        if actor is None:
            raise Unauthorized("Authentication required")
        note = await self._get_existing(note_id)
        ensure_author(note, actor)
        request = validate_payload(NoteUpdate, data)

        update_data = {
            "title": request.title,
            "content": request.content,
            "branch": request.branch.value,
            "year": request.year,
            "subject": request.subject,
            "files": [f.model_dump() for f in request.files],
        }
        if request.is_public is not None:
            update_data["is_public"] = request.is_public

        updated = await self.note_repo.update_note(note_id, update_data)
        if not updated:
            raise NotFound("Note not found")

        logger.info(
            "Note updated",
            extra={"note_id": str(note_id), "author_id": str(actor), "fields": sorted(update_data)},
        )
        return NoteResponse.from_note(updated, actor)

    async def delete_note(self, actor: Optional[UUID], note_id: UUID) -> None:
        """Delete note."""
        if actor is None:
            raise Unauthorized("Authentication required")
        note = await self._get_existing(note_id)
        ensure_author(note, actor)

        if not await self.note_repo.delete_note(note_id):
            raise NotFound("Note not found")
        logger.info("Note deleted", extra={"note_id": str(note_id), "author_id": str(actor)})

    async def toggle_like(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Like the note if actor hasn't yet, otherwise take the like back."""
        if actor is None:
            raise Unauthorized("Authentication required")
        note = await self._get_existing(note_id)
        ensure_can_like(note, actor)

        liked = await self.note_repo.toggle_like(note_id, actor)
        note = await self._get_existing(note_id)

        logger.info(
            "Note like toggled",
            extra={"note_id": str(note_id), "user_id": str(actor), "liked": liked},
        )
        return NoteResponse.from_note(note, actor)

    async def toggle_privacy(self, actor: Optional[UUID], note_id: UUID) -> NoteResponse:
        """Flip the note between public and private."""
        if actor is None:
            raise Unauthorized("Authentication required")
        note = await self._get_existing(note_id)
        ensure_author(note, actor)

        if not await self.note_repo.flip_privacy(note_id):
            raise NotFound("Note not found")
        note = await self._get_existing(note_id)

        logger.info(
            "Note privacy toggled",
            extra={"note_id": str(note_id), "author_id": str(actor), "is_public": note.is_public},
        )
        return NoteResponse.from_note(note, actor)

    async def _get_existing(self, note_id: UUID) -> Note:
        note = await self.note_repo.get_by_id(note_id)
        if not note:
            raise NotFound("Note not found")
        return note
