"""API endpoints for payment events."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import schemas
from tierwise.api import deps
from tierwise.api.context import ApiContext
from tierwise.api.router import TrailingSlashRouter
from tierwise.platform.billing.subscription_service import SubscriptionService

router = TrailingSlashRouter()


@router.post("", response_model=schemas.Payment)
async def record_payment(
    payment_in: schemas.PaymentCreate,
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
    subscription_service: SubscriptionService = Depends(deps.get_subscription_service),
) -> schemas.Payment:
    """Record a payment reported by the payment provider.

    Confirmed payments start a new billing cycle for the subscription.
    """
    return await subscription_service.record_payment(db, payment_in=payment_in, ctx=ctx)
