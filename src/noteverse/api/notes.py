"""Notes API endpoints.

Request bodies are handed to the service unparsed so that authentication
and permission errors take precedence over validation errors.
"""

from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.notes import ALL, NoteListResponse, NoteResponse
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: Any = Body(None, description="Note fields, see NoteCreate"),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note authored by the caller."""
    note_service = NoteService(session)
    return await note_service.create_note(current_user_id, payload)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    branch: Optional[str] = Query(ALL, description="Branch id or 'all'"),
    year: Optional[str] = Query(ALL, description="Year 1-4 or 'all'"),
    subject: Optional[str] = Query(None, description="Subject contains (case-insensitive)"),
    search: Optional[str] = Query(None, description="Title, content or subject contains"),
    author_id: Optional[str] = Query(None, description="Only notes by this author"),
    liked: bool = Query(False, description="Only notes the caller has liked"),
    page: int = Query(1),
    per_page: int = Query(20),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List notes visible to the caller, newest first."""
    note_service = NoteService(session)
    params = {
        "branch": branch,
        "year": year,
        "subject": subject,
        "search": search,
        "author_id": author_id,
        "liked": liked,
        "page": page,
        "per_page": per_page,
    }
    return await note_service.list_notes(current_user_id, params)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    note_service = NoteService(session)
    return await note_service.get_note(current_user_id, note_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    payload: Any = Body(None, description="Replacement note fields, see NoteUpdate"),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a note."""
    note_service = NoteService(session)
    return await note_service.update_note(current_user_id, note_id, payload)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note."""
    note_service = NoteService(session)
    await note_service.delete_note(current_user_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/like", response_model=NoteResponse)
async def toggle_like(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Like or unlike a note."""
    note_service = NoteService(session)
    return await note_service.toggle_like(current_user_id, note_id)


@router.post("/{note_id}/privacy", response_model=NoteResponse)
async def toggle_privacy(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Switch a note between public and private."""
    note_service = NoteService(session)
    return await note_service.toggle_privacy(current_user_id, note_id)
