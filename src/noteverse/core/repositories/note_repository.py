"""Note repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, func, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..access import ListScope
from ..logging import get_logger
from ..models.base import utcnow
from ..models.note import Note, NoteLike

logger = get_logger("repositories.note")


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _detail_query(self):
        # author and likers are always expanded for responses
        return (
            select(Note)
            .options(
                selectinload(Note.author),
                selectinload(Note.likes).selectinload(NoteLike.user),
            )
            .execution_options(populate_existing=True)
        )

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.commit()
        return await self.get_by_id(note.id)

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID with author and likes loaded."""
        stmt = self._detail_query().where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note_id: UUID, update_data: dict) -> Optional[Note]:
        """Apply field updates and refresh updated_at."""
        note = await self.get_by_id(note_id)
        if not note:
            return None

        for key, value in update_data.items():
            setattr(note, key, value)
        note.updated_at = utcnow()

        await self.session.commit()
        return await self.get_by_id(note_id)

    async def delete_note(self, note_id: UUID) -> bool:
        """Delete note and its likes."""
        note = await self.get_by_id(note_id)
        if not note:
            return False

        await self.session.delete(note)
        await self.session.commit()
        logger.debug("Deleted note row", extra={"note_id": str(note_id)})
        return True

    async def list_notes(
        self,
        scope: ListScope,
        actor: Optional[UUID] = None,
        author_id: Optional[UUID] = None,
        branch: Optional[str] = None,
        year: Optional[str] = None,
        subject: Optional[str] = None,
        search: Optional[str] = None,
        liked_by: Optional[UUID] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[List[Note], int]:
        """List notes visible under ``scope``, newest first, with total count."""
        conditions = []

        if scope is ListScope.PUBLIC_ONLY:
            conditions.append(Note.is_public.is_(True))
        elif scope is ListScope.PUBLIC_OR_OWN:
            conditions.append(or_(Note.is_public.is_(True), Note.author_id == actor))

        if author_id is not None:
            conditions.append(Note.author_id == author_id)
        if branch:
            conditions.append(Note.branch == branch)
        if year:
            conditions.append(Note.year == year)
        if subject:
            conditions.append(Note.subject.icontains(subject, autoescape=True))
        if search:
            conditions.append(
                or_(
                    Note.title.icontains(search, autoescape=True),
                    Note.content.icontains(search, autoescape=True),
                    Note.subject.icontains(search, autoescape=True),
                )
            )
        if liked_by is not None:
            conditions.append(
                Note.id.in_(select(NoteLike.note_id).where(NoteLike.user_id == liked_by))
            )

        count_stmt = select(func.count(Note.id)).where(*conditions)
        total_result = await self.session.execute(count_stmt)
        total_count = total_result.scalar() or 0

        offset = (page - 1) * per_page
        stmt = (
            self._detail_query()
            .where(*conditions)
            .order_by(desc(Note.created_at), desc(Note.id))
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars()), total_count

    def _insert_ignoring_duplicates(self):
        # single-statement insert that is a no-op when the like already exists
        if self.session.bind is not None and self.session.bind.dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert
        return insert(NoteLike)

    async def _insert_like(self, note_id: UUID, user_id: UUID) -> bool:
        stmt = (
            self._insert_ignoring_duplicates()
            .values(note_id=note_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["note_id", "user_id"])
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def _delete_like(self, note_id: UUID, user_id: UUID) -> bool:
        stmt = delete(NoteLike).where(NoteLike.note_id == note_id, NoteLike.user_id == user_id)
        result = await self.session.execute(stmt, execution_options={"synchronize_session": False})
        return result.rowcount > 0

    async def _touch(self, note_id: UUID) -> None:
        stmt = update(Note).where(Note.id == note_id).values(updated_at=utcnow())
        await self.session.execute(stmt, execution_options={"synchronize_session": False})

    async def add_like(self, note_id: UUID, user_id: UUID) -> bool:
        """Add user to the note's likes. Returns False if already present."""
        added = await self._insert_like(note_id, user_id)
        if added:
            await self._touch(note_id)
        await self.session.commit()
        return added

    async def remove_like(self, note_id: UUID, user_id: UUID) -> bool:
        """Remove user from the note's likes. Returns False if absent."""
        removed = await self._delete_like(note_id, user_id)
        if removed:
            await self._touch(note_id)
        await self.session.commit()
        return removed

    async def toggle_like(self, note_id: UUID, user_id: UUID) -> bool:
        """Flip membership of user in likes. Returns True if now liked."""
        if await self._delete_like(note_id, user_id):
            liked = False
        else:
            await self._insert_like(note_id, user_id)
            liked = True
        await self._touch(note_id)
        await self.session.commit()
        return liked

    async def flip_privacy(self, note_id: UUID) -> bool:
        """Atomically negate is_public. Returns False if the note is gone."""
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(is_public=not_(Note.is_public), updated_at=utcnow())
        )
        result = await self.session.execute(stmt, execution_options={"synchronize_session": False})
        await self.session.commit()
        return result.rowcount > 0

    async def count_by_author(self, author_id: UUID) -> int:
        stmt = select(func.count(Note.id)).where(Note.author_id == author_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
