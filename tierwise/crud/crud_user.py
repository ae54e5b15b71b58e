"""The CRUD operations for the User model."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tierwise.crud._base import CRUDBase
from tierwise.models.user import User
from tierwise.schemas.user import UserCreate


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    """CRUD operations for the User model."""

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """Get a user by email, with team memberships loaded.

        Important: this method does not check who is asking. It backs authentication,
        where there is no current user yet. Use responsibly.

        Args:
            db (AsyncSession): The database session.
            email (str): The email of the user to get.

        Returns:
            Optional[User]: The user with the given email.
        """
        stmt = (
            select(User)
            .options(selectinload(User.user_teams))
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.unique().scalar_one_or_none()


user = CRUDUser(User)
