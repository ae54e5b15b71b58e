"""CRUD operations for the Payment model."""

from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise.crud._base import CRUDBase
from tierwise.models.payment import Payment
from tierwise.models.subscription import Subscription
from tierwise.schemas.payment import PaymentCreate, PaymentStatus
from tierwise.schemas.subscription import Subscriber


class CRUDPayment(CRUDBase[Payment, PaymentCreate, PaymentCreate]):
    """CRUD operations for the Payment model."""

    async def get_latest_confirmed_for_subscriber(
        self,
        db: AsyncSession,
        *,
        subscriber: Subscriber,
    ) -> Optional[Payment]:
        """Get the subscriber's most recent confirmed payment.

        Payments of every subscription the subscriber ever held count, cancelled ones
        included, so a cycle paid for before a plan switch is still found after it.

        Args:
            db (AsyncSession): The database session.
            subscriber (Subscriber): The holder of the subscriptions.

        Returns:
            Optional[Payment]: The confirmed payment with the latest `paid_at`, if any.
        """
        query = (
            select(self.model)
            .join(Subscription, Subscription.id == self.model.subscription_id)
            .where(
                Subscription.subscriber_kind == subscriber.kind.value,
                Subscription.subscriber_id == subscriber.id,
                self.model.status == PaymentStatus.CONFIRMED.value,
            )
            .order_by(desc(self.model.paid_at), desc(self.model.created_at))
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalars().first()


payment = CRUDPayment(Payment)
