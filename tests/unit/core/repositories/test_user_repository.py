import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from noteverse.core.repositories import UserRepository


@pytest.mark.asyncio
async def test_create_and_lookup(test_session):
    repo = UserRepository(test_session)
    user = await repo.create_user(
        {"username": "erin", "email": "erin@example.com", "password_hash": "hash"}
    )

    assert (await repo.get_by_id(user.id)).email == "erin@example.com"
    assert (await repo.get_by_email("ERIN@example.com ")).id == user.id
    assert await repo.is_email_taken("erin@EXAMPLE.com") is True
    assert await repo.is_email_taken("frank@example.com") is False


@pytest.mark.asyncio
async def test_missing_user(test_session):
    repo = UserRepository(test_session)
    assert await repo.get_by_id(uuid.uuid4()) is None
    assert await repo.get_by_email("ghost@example.com") is None


@pytest.mark.asyncio
async def test_email_is_unique(test_session):
    repo = UserRepository(test_session)
    await repo.create_user({"username": "a", "email": "dup@example.com", "password_hash": "h"})

    with pytest.raises(IntegrityError):
        await repo.create_user({"username": "b", "email": "dup@example.com", "password_hash": "h"})
