"""API endpoints for switching plans."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import schemas
from tierwise.api import deps
from tierwise.api.context import ApiContext
from tierwise.api.router import TrailingSlashRouter
from tierwise.platform.billing.subscription_service import SubscriptionService

router = TrailingSlashRouter()


@router.post("/quote", response_model=schemas.UpgradeQuote)
async def quote_upgrade(
    request: schemas.SubscriptionRequest,
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
    subscription_service: SubscriptionService = Depends(deps.get_subscription_service),
) -> schemas.UpgradeQuote:
    """Quote what switching to a plan would cost right now.

    The unused remainder of the current billing cycle is credited against the
    price of the target plan. Nothing is changed.
    """
    return await subscription_service.quote_upgrade(
        db, plan_id=request.plan_id, ctx=ctx, team_id=request.team_id
    )


@router.post("", response_model=schemas.SuccessResponse)
async def subscribe(
    request: schemas.SubscriptionRequest,
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
    subscription_service: SubscriptionService = Depends(deps.get_subscription_service),
) -> schemas.SuccessResponse:
    """Switch to a plan, cancelling the current subscription."""
    return await subscription_service.subscribe(
        db, plan_id=request.plan_id, ctx=ctx, team_id=request.team_id
    )


@router.get("/current", response_model=schemas.SubscriptionWithPlan)
async def get_current_subscription(
    team_id: Optional[UUID] = Query(
        None, description="Team to look up; the caller's own subscription when omitted"
    ),
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
    subscription_service: SubscriptionService = Depends(deps.get_subscription_service),
) -> schemas.SubscriptionWithPlan:
    """Get the active subscription together with its plan."""
    return await subscription_service.get_current_subscription(db, ctx=ctx, team_id=team_id)
