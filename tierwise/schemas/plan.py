"""Plan schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PlanBase(BaseModel):
    """Base schema for Plan."""

    name: str = Field(..., min_length=1, description="Unique display name of the plan")
    price: int = Field(..., description="Price per billing cycle in whole monetary units")


class PlanCreate(PlanBase):
    """Schema for creating a Plan object."""

    pass


class PlanUpdate(PlanBase):
    """Schema for updating a Plan object.

    Both fields are replaced; there is no partial update.
    """

    pass


class PlanInDBBase(PlanBase):
    """Base schema for Plan stored in DB."""

    model_config = {"from_attributes": True}

    id: UUID
    created_at: datetime
    modified_at: datetime


class Plan(PlanInDBBase):
    """Schema for Plan."""

    pass


class PlanList(BaseModel):
    """All plans, cheapest first."""

    plans: list[Plan] = Field(default_factory=list)
