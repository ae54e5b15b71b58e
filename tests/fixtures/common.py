"""Common test fixtures."""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import schemas
from tierwise.api.context import ApiContext
from tierwise.core.logging import logger
from tierwise.models import Team, User, UserTeam


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_context(user: User, team_ids: list[uuid.UUID] = ()) -> ApiContext:
    """Build the request context an authenticated user would get."""
    user_schema = schemas.User(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        is_superuser=user.is_superuser,
        team_ids=list(team_ids),
    )
    return ApiContext(
        request_id=str(uuid.uuid4()),
        user=user_schema,
        auth_method="system",
        logger=logger.with_context(request_id="test", user_email=user.email),
    )


async def _add_user(db: AsyncSession, email: str, is_superuser: bool = False) -> User:
    user = User(email=email, full_name=email.split("@")[0], is_superuser=is_superuser)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """The first superuser, who may manage plans."""
    return await _add_user(db_session, "admin@example.com", is_superuser=True)


@pytest.fixture
async def member_user(db_session: AsyncSession) -> User:
    """A regular user who belongs to `team`."""
    return await _add_user(db_session, "member@example.com")


@pytest.fixture
async def outsider_user(db_session: AsyncSession) -> User:
    """A regular user without any team."""
    return await _add_user(db_session, "outsider@example.com")


@pytest.fixture
async def team(db_session: AsyncSession, member_user: User) -> Team:
    """A team with `member_user` as its owner."""
    team = Team(name="Growth")
    db_session.add(team)
    await db_session.flush()
    db_session.add(UserTeam(user_id=member_user.id, team_id=team.id, role="owner"))
    await db_session.commit()
    return team


@pytest.fixture
def admin_ctx(admin_user: User) -> ApiContext:
    """Context of the admin."""
    return make_context(admin_user)


@pytest.fixture
def member_ctx(member_user: User, team: Team) -> ApiContext:
    """Context of the team member."""
    return make_context(member_user, team_ids=[team.id])


@pytest.fixture
def outsider_ctx(outsider_user: User) -> ApiContext:
    """Context of a user without teams."""
    return make_context(outsider_user)
