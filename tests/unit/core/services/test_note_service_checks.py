"""Order of checks in NoteService, with the repository mocked out."""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from noteverse.core.access import ListScope
from noteverse.core.exceptions import Forbidden, NotFound, Unauthorized, ValidationError
from noteverse.core.services.note_service import NoteService

AUTHOR = uuid.uuid4()
OTHER = uuid.uuid4()


def dummy_note(is_public=True, author_id=AUTHOR):
    now = datetime.now(timezone.utc)
    author = SimpleNamespace(id=author_id, username="alice", email="alice@example.com")
    note = SimpleNamespace(
        id=uuid.uuid4(),
        title="Graphs",
        content="BFS and DFS",
        preview="BFS and DFS",
        is_public=is_public,
        branch="cs",
        year="2",
        subject="Algorithms",
        files=[],
        file_count=0,
        author_id=author_id,
        author=author,
        likes=[],
        like_user_ids=[],
        like_count=0,
        created_at=now,
        updated_at=now,
    )
    note.is_liked_by = lambda user_id: False
    note.is_authored_by = lambda user_id: user_id == author_id
    return note


@pytest.fixture
def service():
    svc = NoteService(session=None)
    svc.note_repo = AsyncMock()
    return svc


@pytest.mark.asyncio
async def test_unauthorized_before_lookup(service):
    with pytest.raises(Unauthorized):
        await service.update_note(None, uuid.uuid4(), {})
    with pytest.raises(Unauthorized):
        await service.toggle_privacy(None, uuid.uuid4())
    service.note_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_not_found_before_forbidden(service):
    service.note_repo.get_by_id.return_value = None
    with pytest.raises(NotFound):
        await service.delete_note(OTHER, uuid.uuid4())
    service.note_repo.delete_note.assert_not_called()


@pytest.mark.asyncio
async def test_forbidden_before_validation(service):
    service.note_repo.get_by_id.return_value = dummy_note()
    with pytest.raises(Forbidden):
        await service.update_note(OTHER, uuid.uuid4(), {"title": ""})
    service.note_repo.update_note.assert_not_called()


@pytest.mark.asyncio
async def test_validation_after_permission(service):
    service.note_repo.get_by_id.return_value = dummy_note()
    with pytest.raises(ValidationError):
        await service.update_note(AUTHOR, uuid.uuid4(), {"title": ""})
    service.note_repo.update_note.assert_not_called()


@pytest.mark.asyncio
async def test_non_author_never_reaches_mutations(service):
    service.note_repo.get_by_id.return_value = dummy_note()

    with pytest.raises(Forbidden):
        await service.delete_note(OTHER, uuid.uuid4())
    with pytest.raises(Forbidden):
        await service.toggle_privacy(OTHER, uuid.uuid4())

    service.note_repo.delete_note.assert_not_called()
    service.note_repo.flip_privacy.assert_not_called()


@pytest.mark.asyncio
async def test_like_on_unreadable_note_is_forbidden(service):
    service.note_repo.get_by_id.return_value = dummy_note(is_public=False)
    with pytest.raises(Forbidden):
        await service.toggle_like(OTHER, uuid.uuid4())
    service.note_repo.toggle_like.assert_not_called()


@pytest.mark.asyncio
async def test_toggle_like_passes_actor(service):
    note = dummy_note()
    service.note_repo.get_by_id.return_value = note
    service.note_repo.toggle_like.return_value = True

    await service.toggle_like(OTHER, note.id)

    service.note_repo.toggle_like.assert_awaited_once_with(note.id, OTHER)


@pytest.mark.asyncio
async def test_create_sets_author_from_actor(service, note_payload):
    note = dummy_note()
    service.note_repo.create_note.return_value = note

    await service.create_note(AUTHOR, {**note_payload, "author_id": str(OTHER)})

    sent = service.note_repo.create_note.await_args.args[0]
    assert sent["author_id"] == AUTHOR
    assert sent["branch"] == "cs"
    assert sent["files"][0]["type"] == "application/pdf"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "actor, params, scope",
    [
        (None, {}, ListScope.PUBLIC_ONLY),
        (OTHER, {}, ListScope.PUBLIC_OR_OWN),
        (AUTHOR, {"author_id": str(AUTHOR)}, ListScope.OWNER_ALL),
        (OTHER, {"author_id": str(AUTHOR)}, ListScope.PUBLIC_ONLY),
    ],
)
async def test_list_scope_selection(service, actor, params, scope):
    service.note_repo.list_notes.return_value = ([], 0)

    result = await service.list_notes(actor, params)

    assert result.total == 0
    assert service.note_repo.list_notes.await_args.args[0] is scope
