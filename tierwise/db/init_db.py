"""Initialize the database with the first superuser."""

from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import crud, schemas
from tierwise.core.config import settings
from tierwise.core.logging import logger


async def init_db(db: AsyncSession) -> None:
    """Create the first superuser if it does not exist yet.

    The superuser holds the admin capability, so a fresh deployment can manage the
    plan catalog before any other account exists.

    Args:
    ----
        db (AsyncSession): The database session.
    """
    user = await crud.user.get_by_email(db, email=settings.FIRST_SUPERUSER)
    if user is not None:
        return

    logger.info(f"User {settings.FIRST_SUPERUSER} not found, creating...")
    user_in = schemas.UserCreate(
        email=settings.FIRST_SUPERUSER,
        full_name="Superuser",
        is_superuser=True,
    )
    await crud.user.create(db, obj_in=user_in)
