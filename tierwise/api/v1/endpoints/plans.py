"""API endpoints for the plan catalog."""

from uuid import UUID

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import schemas
from tierwise.api import deps
from tierwise.api.context import ApiContext
from tierwise.api.router import TrailingSlashRouter
from tierwise.core.plan_service import plan_service

router = TrailingSlashRouter()


@router.get("", response_model=schemas.PlanList)
async def list_plans(db: AsyncSession = Depends(deps.get_db)) -> schemas.PlanList:
    """List all plans, cheapest first.

    The catalog is public, so no authentication is required.
    """
    return await plan_service.list_plans(db)


@router.post("", response_model=schemas.SuccessResponse)
async def create_plan(
    plan_in: schemas.PlanCreate,
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
) -> schemas.SuccessResponse:
    """Create a plan. Only administrators may do this."""
    return await plan_service.create_plan(db, plan_in=plan_in, ctx=ctx)


@router.put("/{plan_id}", response_model=schemas.SuccessResponse)
async def update_plan(
    plan_in: schemas.PlanUpdate,
    plan_id: UUID = Path(..., description="The id of the plan to update"),
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
) -> schemas.SuccessResponse:
    """Rename and reprice a plan.

    Existing subscriptions keep the price they were charged; only future
    subscriptions and quotes use the new price.
    """
    return await plan_service.update_plan(db, plan_id=plan_id, plan_in=plan_in, ctx=ctx)
