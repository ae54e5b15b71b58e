"""Payment schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    """Payment status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class PaymentCreate(BaseModel):
    """Schema for recording a payment against a subscription."""

    subscription_id: UUID = Field(..., description="Subscription the payment is for")
    amount: int = Field(..., description="Amount paid in whole monetary units")
    status: PaymentStatus = Field(default=PaymentStatus.CONFIRMED, description="Payment status")
    paid_at: Optional[datetime] = Field(
        None, description="Start of the paid cycle; defaults to the time of recording"
    )


class PaymentInDBBase(BaseModel):
    """Base schema for Payment stored in DB."""

    model_config = {"from_attributes": True}

    id: UUID
    subscription_id: UUID
    amount: int
    status: PaymentStatus
    paid_at: datetime
    created_at: datetime
    modified_at: datetime


class Payment(PaymentInDBBase):
    """Schema for Payment."""

    pass
