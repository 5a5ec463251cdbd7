"""Tests for NoteRepository against SQLite in-memory."""

import uuid

import pytest
from sqlalchemy import func, select

from noteverse.core.access import ListScope
from noteverse.core.models import Note, NoteLike
from noteverse.core.repositories import NoteRepository


@pytest.mark.asyncio
async def test_create_and_get_note(test_session, author):
    repo = NoteRepository(test_session)
    note = await repo.create_note(
        {
            "title": "Signals",
            "content": "Fourier series",
            "branch": "ece",
            "year": "2",
            "subject": "Signals and Systems",
            "files": [{"name": "a.pdf", "url": "/uploads/a.pdf", "type": "application/pdf", "size": 10}],
            "author_id": author.id,
        }
    )

    assert note.id is not None
    assert note.is_public is True
    assert note.likes == []
    assert note.author.username == "alice"
    assert note.files[0]["name"] == "a.pdf"

    fetched = await repo.get_by_id(note.id)
    assert fetched is not None
    assert fetched.subject == "Signals and Systems"


@pytest.mark.asyncio
async def test_get_missing_note_returns_none(test_session):
    repo = NoteRepository(test_session)
    assert await repo.get_by_id(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_update_note_refreshes_updated_at(test_session, author, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id)
    before = note.updated_at

    updated = await repo.update_note(note.id, {"title": "Renamed"})

    assert updated.title == "Renamed"
    # SQLite hands back naive datetimes; both sides are UTC
    assert updated.updated_at.replace(tzinfo=None) > before.replace(tzinfo=None)
    assert updated.author_id == author.id


@pytest.mark.asyncio
async def test_author_id_cannot_be_reassigned(author, other_user, note_factory):
    note = await note_factory(author.id)
    with pytest.raises(ValueError):
        note.author_id = other_user.id


@pytest.mark.asyncio
async def test_delete_note_removes_likes(test_session, author, other_user, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id)
    await repo.toggle_like(note.id, other_user.id)

    assert await repo.delete_note(note.id) is True
    assert await repo.get_by_id(note.id) is None

    remaining = await test_session.execute(select(func.count(NoteLike.id)))
    assert remaining.scalar() == 0
    assert await repo.delete_note(note.id) is False


@pytest.mark.asyncio
async def test_toggle_like_twice_restores_likes(test_session, author, other_user, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id)

    assert await repo.toggle_like(note.id, other_user.id) is True
    liked = await repo.get_by_id(note.id)
    assert liked.like_user_ids == [other_user.id]
    assert liked.likes[0].user.username == "bob"

    assert await repo.toggle_like(note.id, other_user.id) is False
    unliked = await repo.get_by_id(note.id)
    assert unliked.like_user_ids == []


@pytest.mark.asyncio
async def test_add_like_is_idempotent(test_session, author, other_user, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id)

    assert await repo.add_like(note.id, other_user.id) is True
    assert await repo.add_like(note.id, other_user.id) is False

    count = await test_session.execute(
        select(func.count(NoteLike.id)).where(NoteLike.note_id == note.id)
    )
    assert count.scalar() == 1

    assert await repo.remove_like(note.id, other_user.id) is True
    assert await repo.remove_like(note.id, other_user.id) is False


@pytest.mark.asyncio
async def test_likes_from_different_users_accumulate(test_session, author, other_user, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id)

    await repo.toggle_like(note.id, other_user.id)
    await repo.toggle_like(note.id, author.id)

    fetched = await repo.get_by_id(note.id)
    assert set(fetched.like_user_ids) == {author.id, other_user.id}


@pytest.mark.asyncio
async def test_flip_privacy(test_session, author, note_factory):
    repo = NoteRepository(test_session)
    note = await note_factory(author.id, is_public=True)

    assert await repo.flip_privacy(note.id) is True
    assert (await repo.get_by_id(note.id)).is_public is False

    assert await repo.flip_privacy(note.id) is True
    assert (await repo.get_by_id(note.id)).is_public is True

    assert await repo.flip_privacy(uuid.uuid4()) is False


class TestListNotes:
    @pytest.mark.asyncio
    async def test_public_only_scope_newest_first(self, test_session, author, other_user, note_factory):
        repo = NoteRepository(test_session)
        old = await note_factory(author.id, title="old")
        await note_factory(author.id, title="hidden", is_public=False)
        new = await note_factory(other_user.id, title="new")

        notes, total = await repo.list_notes(ListScope.PUBLIC_ONLY)

        assert total == 2
        assert [n.id for n in notes] == [new.id, old.id]

    @pytest.mark.asyncio
    async def test_public_or_own_scope(self, test_session, author, other_user, note_factory):
        repo = NoteRepository(test_session)
        await note_factory(author.id, is_public=False)
        await note_factory(other_user.id, is_public=False)
        await note_factory(other_user.id)

        notes, total = await repo.list_notes(ListScope.PUBLIC_OR_OWN, actor=author.id)

        assert total == 2
        assert all(n.is_public or n.author_id == author.id for n in notes)

    @pytest.mark.asyncio
    async def test_owner_scope_includes_private(self, test_session, author, other_user, note_factory):
        repo = NoteRepository(test_session)
        await note_factory(author.id)
        await note_factory(author.id, is_public=False)
        await note_factory(other_user.id)

        notes, total = await repo.list_notes(ListScope.OWNER_ALL, actor=author.id, author_id=author.id)

        assert total == 2
        assert {n.author_id for n in notes} == {author.id}

    @pytest.mark.asyncio
    async def test_filters(self, test_session, author, note_factory):
        repo = NoteRepository(test_session)
        await note_factory(author.id, branch="me", year="1", subject="Thermodynamics", title="Heat")
        await note_factory(author.id, branch="cs", year="2", subject="Data Structures", title="Trees")
        await note_factory(author.id, branch="cs", year="3", subject="Networks", content="TCP 100% reliable")

        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, branch="cs")
        assert len(notes) == 2

        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, branch="cs", year="3")
        assert [n.subject for n in notes] == ["Networks"]

        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, subject="thermo")
        assert [n.title for n in notes] == ["Heat"]

        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, search="TREES")
        assert [n.title for n in notes] == ["Trees"]

        # search covers subject too
        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, search="network")
        assert len(notes) == 1

        # LIKE wildcards in user input are matched literally
        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, search="100%")
        assert len(notes) == 1
        notes, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, search="1_0")
        assert notes == []

    @pytest.mark.asyncio
    async def test_liked_by_filter(self, test_session, author, other_user, note_factory):
        repo = NoteRepository(test_session)
        liked = await note_factory(author.id)
        await note_factory(author.id)
        await repo.toggle_like(liked.id, other_user.id)

        notes, total = await repo.list_notes(
            ListScope.PUBLIC_OR_OWN, actor=other_user.id, liked_by=other_user.id
        )

        assert total == 1
        assert notes[0].id == liked.id

    @pytest.mark.asyncio
    async def test_pagination(self, test_session, author, note_factory):
        repo = NoteRepository(test_session)
        created = [await note_factory(author.id) for _ in range(5)]

        page1, total = await repo.list_notes(ListScope.PUBLIC_ONLY, page=1, per_page=2)
        page3, _ = await repo.list_notes(ListScope.PUBLIC_ONLY, page=3, per_page=2)

        assert total == 5
        assert [n.id for n in page1] == [created[4].id, created[3].id]
        assert [n.id for n in page3] == [created[0].id]

    @pytest.mark.asyncio
    async def test_count_by_author(self, test_session, author, other_user, note_factory):
        repo = NoteRepository(test_session)
        await note_factory(author.id)
        await note_factory(author.id, is_public=False)

        assert await repo.count_by_author(author.id) == 2
        assert await repo.count_by_author(other_user.id) == 0

    @pytest.mark.asyncio
    async def test_all_notes_stored(self, test_session, author, note_factory):
        await note_factory(author.id)
        result = await test_session.execute(select(func.count(Note.id)))
        assert result.scalar() == 1
