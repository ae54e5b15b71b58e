"""Unit of work for database transactions."""

from sqlalchemy.ext.asyncio import AsyncSession


class UnitOfWork:
    """Unit of work for database transactions.

    CRUD methods commit on their own unless they are handed a unit of work, in which case
    every statement joins one transaction that commits when the block exits cleanly and
    rolls back when it raises.

    Usage:
    -----
    ```python

    await crud.plan.create(db, obj_in=plan_in)  # commits automatically

    async with UnitOfWork(db) as uow:
        await crud.subscription.cancel_active(db, subscriber=subscriber, uow=uow)
        await crud.subscription.create(db, obj_in=subscription_in, uow=uow)
        # both statements commit together, or neither does
    ```

    """

    def __init__(self, session: AsyncSession):
        """Initialize the UnitOfWork with a database session.

        Args:
        ----
            session (AsyncSession): The database session.

        """
        self.session = session
        self._committed = False
        self._rolledback = False

    async def commit(self) -> None:
        """Commit the transaction.

        If the transaction has already been committed or rolled back, this method does nothing.
        """
        if not self._committed and not self._rolledback:
            await self.session.commit()
            self._committed = True

    async def rollback(self) -> None:
        """Rollback the transaction.

        If the transaction has already been committed or rolled back, this method does nothing.
        """
        if not self._committed and not self._rolledback:
            await self.session.rollback()
            self._rolledback = True

    async def __aenter__(self) -> "UnitOfWork":
        """Enter the context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Commit on a clean exit, roll back when the block raised.

        Args:
        ----
            exc_type (Type[Exception]): The exception type.
            exc_val (Exception): The exception value.
            exc_tb (TracebackType): The exception traceback.

        """
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()
