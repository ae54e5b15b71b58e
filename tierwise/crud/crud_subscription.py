"""CRUD operations for the Subscription model."""

from typing import Optional

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tierwise.core.datetime_utils import utc_now_naive
from tierwise.crud._base import CRUDBase
from tierwise.db.unit_of_work import UnitOfWork
from tierwise.models.subscription import Subscription
from tierwise.schemas.subscription import Subscriber, SubscriptionCreate


class CRUDSubscription(CRUDBase[Subscription, SubscriptionCreate, SubscriptionCreate]):
    """CRUD operations for the Subscription model.

    Subscriptions are never updated field by field: the only state change is the
    soft-cancel performed by `cancel_active`.
    """

    def _for_subscriber(self, subscriber: Subscriber):
        return select(self.model).where(
            self.model.subscriber_kind == subscriber.kind.value,
            self.model.subscriber_id == subscriber.id,
        )

    async def get_active(
        self,
        db: AsyncSession,
        *,
        subscriber: Subscriber,
        with_plan: bool = False,
        for_update: bool = False,
    ) -> Optional[Subscription]:
        """Get the subscriber's active subscription.

        Args:
            db (AsyncSession): The database session.
            subscriber (Subscriber): The holder of the subscription.
            with_plan (bool): Eagerly load the subscribed plan.
            for_update (bool): Lock the row until the surrounding transaction ends.

        Returns:
            Optional[Subscription]: The non-cancelled subscription, if any.
        """
        query = self._for_subscriber(subscriber).where(self.model.is_cancelled.is_(False))
        if with_plan:
            query = query.options(selectinload(self.model.plan)).execution_options(
                populate_existing=True
            )
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_subscriber(
        self,
        db: AsyncSession,
        *,
        subscriber: Subscriber,
        limit: int = 100,
    ) -> list[Subscription]:
        """Get the subscriber's subscriptions, newest first, cancelled ones included."""
        query = (
            self._for_subscriber(subscriber)
            .order_by(desc(self.model.created_at))
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def cancel_active(
        self,
        db: AsyncSession,
        *,
        subscriber: Subscriber,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Soft-cancel every active subscription of a subscriber.

        Args:
            db (AsyncSession): The database session.
            subscriber (Subscriber): The holder of the subscriptions.
            uow (Optional[UnitOfWork]): Unit of work for transaction control.

        Returns:
            int: Number of subscriptions cancelled.
        """
        statement = (
            update(self.model)
            .where(
                self.model.subscriber_kind == subscriber.kind.value,
                self.model.subscriber_id == subscriber.id,
                self.model.is_cancelled.is_(False),
            )
            .values(is_cancelled=True, modified_at=utc_now_naive())
            .execution_options(synchronize_session="fetch")
        )
        result = await db.execute(statement)

        if uow is None:
            await db.commit()
        return result.rowcount


subscription = CRUDSubscription(Subscription)
