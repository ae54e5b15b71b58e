"""Tests for the first-superuser bootstrap."""

from tierwise import crud
from tierwise.core.config import settings
from tierwise.db.init_db import init_db


async def test_creates_first_superuser(db_session):
    await init_db(db_session)

    user = await crud.user.get_by_email(db_session, email=settings.FIRST_SUPERUSER)
    assert user.is_superuser is True
    assert user.is_active is True


async def test_is_idempotent(db_session):
    await init_db(db_session)
    await init_db(db_session)

    users = await crud.user.get_multi(db_session)
    assert len(users) == 1
