"""CRUD operations for the Plan model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise.crud._base import CRUDBase
from tierwise.models.plan import Plan
from tierwise.schemas.plan import PlanCreate, PlanUpdate


class CRUDPlan(CRUDBase[Plan, PlanCreate, PlanUpdate]):
    """CRUD operations for the Plan model."""

    async def get_by_name(
        self,
        db: AsyncSession,
        *,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Plan]:
        """Get the plan carrying a name.

        Args:
            db (AsyncSession): The database session.
            name (str): The exact plan name.
            exclude_id (Optional[UUID]): Ignore the plan with this id, used when a plan is
                renamed and may keep its own name.

        Returns:
            Optional[Plan]: The plan with the given name, if any.
        """
        query = select(self.model).where(self.model.name == name)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_all_by_price(self, db: AsyncSession) -> list[Plan]:
        """Get every plan, cheapest first.

        Plans with the same price are ordered by name so the listing is stable.
        """
        query = select(self.model).order_by(asc(self.model.price), asc(self.model.name))
        result = await db.execute(query)
        return list(result.scalars().all())


plan = CRUDPlan(Plan)
