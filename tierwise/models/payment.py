"""Payment model."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import CheckConstraint, Index

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.subscription import Subscription


class Payment(Base):
    """A payment event for a subscription.

    A confirmed payment opens a paid cycle that starts at `paid_at`.
    """

    __tablename__ = "payment"

    subscription_id: Mapped[UUID] = mapped_column(
        ForeignKey("subscription.id", ondelete="CASCADE"), nullable=False
    )

    # Amount actually paid for the plan, in whole monetary units
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    subscription: Mapped["Subscription"] = relationship(
        "Subscription", back_populates="payments", lazy="noload"
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_payment_amount_non_negative"),
        Index("ix_payment_subscription_status", "subscription_id", "status"),
    )
