"""Subscription schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from tierwise.schemas.plan import Plan


class SubscriberKind(str, Enum):
    """Kind of entity that holds a subscription."""

    USER = "user"
    TEAM = "team"


class Subscriber(BaseModel):
    """Opaque reference to the holder of a subscription."""

    model_config = {"frozen": True}

    kind: SubscriberKind
    id: UUID

    def __str__(self) -> str:
        """Render as `kind:id` for logs."""
        return f"{self.kind.value}:{self.id}"


class SubscriptionRequest(BaseModel):
    """Request body for subscribing to, or quoting, a plan."""

    plan_id: UUID = Field(..., description="Plan to subscribe to")
    team_id: Optional[UUID] = Field(
        None, description="Team to act for; the caller's own subscription when omitted"
    )


class SubscriptionCreate(BaseModel):
    """Schema for creating a Subscription object."""

    model_config = {"use_enum_values": True}

    subscriber_kind: SubscriberKind
    subscriber_id: UUID
    plan_id: UUID
    plan_price: int = Field(..., ge=0, description="Plan price at subscription time")
    valid_to: Optional[datetime] = Field(None, description="End of the current paid cycle")


class SubscriptionInDBBase(BaseModel):
    """Base schema for Subscription stored in DB."""

    model_config = {"from_attributes": True}

    id: UUID
    subscriber_kind: SubscriberKind
    subscriber_id: UUID
    plan_id: UUID
    is_cancelled: bool
    plan_price: int
    valid_to: Optional[datetime] = None
    created_at: datetime
    modified_at: datetime


class Subscription(SubscriptionInDBBase):
    """Schema for Subscription."""

    pass


class SubscriptionWithPlan(Subscription):
    """Subscription together with the plan it points to."""

    plan: Plan


class UpgradeQuote(BaseModel):
    """Price to charge for switching to a plan now."""

    price: int = Field(..., ge=0, description="Prorated price in whole monetary units")
