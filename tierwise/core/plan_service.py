"""Plan catalog service."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import crud, schemas
from tierwise.api.context import ApiContext
from tierwise.core.exceptions import InvalidInputError, NameConflictError, PlanNotFoundException
from tierwise.db.unit_of_work import UnitOfWork


class PlanService:
    """Service for managing the plan catalog.

    Administrators create and reprice plans; anyone may list them. Plan names are unique
    and prices are never negative.
    """

    @staticmethod
    def _validate_price(price: int) -> None:
        if price < 0:
            raise InvalidInputError(f"Plan price must not be negative, got {price}")

    async def create_plan(
        self,
        db: AsyncSession,
        plan_in: schemas.PlanCreate,
        ctx: ApiContext,
    ) -> schemas.SuccessResponse:
        """Create a new plan.

        Raises:
            PermissionException: If the caller is not an admin.
            InvalidInputError: If the price is negative.
            NameConflictError: If a plan with the same name exists.
        """
        ctx.require_admin()
        self._validate_price(plan_in.price)

        if await crud.plan.get_by_name(db, name=plan_in.name):
            ctx.logger.warning(f"Rejected plan creation, name '{plan_in.name}' is taken")
            raise NameConflictError(plan_in.name, "A plan with this name already exists")

        try:
            async with UnitOfWork(db) as uow:
                plan = await crud.plan.create(db, obj_in=plan_in, uow=uow)
        except IntegrityError as e:
            # Another request created the same name between our check and the insert
            raise NameConflictError(plan_in.name, "A plan with this name already exists") from e

        ctx.logger.with_context(plan_id=str(plan.id)).info(
            f"Created plan '{plan.name}' priced {plan.price}"
        )
        return schemas.SuccessResponse()

    async def update_plan(
        self,
        db: AsyncSession,
        plan_id: UUID,
        plan_in: schemas.PlanUpdate,
        ctx: ApiContext,
    ) -> schemas.SuccessResponse:
        """Rename and reprice a plan.

        The id and creation time of the plan are kept.

        Raises:
            PermissionException: If the caller is not an admin.
            InvalidInputError: If the price is negative.
            PlanNotFoundException: If no plan has the given id.
            NameConflictError: If a different plan already has the name.
        """
        ctx.require_admin()
        self._validate_price(plan_in.price)

        plan = await crud.plan.get(db, id=plan_id)
        if plan is None:
            raise PlanNotFoundException(f"Plan {plan_id} not found")

        if await crud.plan.get_by_name(db, name=plan_in.name, exclude_id=plan_id):
            ctx.logger.warning(f"Rejected update of plan {plan_id}, name '{plan_in.name}' is taken")
            raise NameConflictError(plan_in.name, "Another plan already has this name")

        previous_price = plan.price
        try:
            async with UnitOfWork(db) as uow:
                await crud.plan.update(
                    db,
                    db_obj=plan,
                    obj_in={"name": plan_in.name, "price": plan_in.price},
                    uow=uow,
                )
        except IntegrityError as e:
            raise NameConflictError(plan_in.name, "Another plan already has this name") from e

        ctx.logger.with_context(plan_id=str(plan_id)).info(
            f"Updated plan '{plan_in.name}', price {previous_price} -> {plan_in.price}"
        )
        return schemas.SuccessResponse()

    async def list_plans(self, db: AsyncSession) -> schemas.PlanList:
        """List all plans ordered by ascending price."""
        plans = await crud.plan.get_all_by_price(db)
        return schemas.PlanList(
            plans=[schemas.Plan.model_validate(plan, from_attributes=True) for plan in plans]
        )


# Singleton instance
plan_service = PlanService()
