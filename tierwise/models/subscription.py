"""Subscription model."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import Index

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.payment import Payment
    from tierwise.models.plan import Plan


class Subscription(Base):
    """A subscriber's subscription to a plan.

    Subscriptions are never deleted. Switching plans cancels the active row and inserts a
    new one, so the table doubles as the subscriber's plan history.
    """

    __tablename__ = "subscription"

    # Opaque subscriber reference: a user or a team
    subscriber_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    subscriber_id: Mapped[UUID] = mapped_column(nullable=False)

    plan_id: Mapped[UUID] = mapped_column(ForeignKey("plan.id"), nullable=False)
    is_cancelled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Plan price when the subscription was created, so later repricing does not change it
    plan_price: Mapped[int] = mapped_column(Integer, nullable=False)
    valid_to: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)

    plan: Mapped["Plan"] = relationship("Plan", back_populates="subscriptions", lazy="noload")
    payments: Mapped[List["Payment"]] = relationship(
        "Payment", back_populates="subscription", lazy="noload"
    )

    __table_args__ = (
        # At most one active subscription per subscriber
        Index(
            "uq_subscription_active_subscriber",
            "subscriber_kind",
            "subscriber_id",
            unique=True,
            postgresql_where=text("NOT is_cancelled"),
            sqlite_where=text("NOT is_cancelled"),
        ),
        Index("ix_subscription_subscriber", "subscriber_kind", "subscriber_id"),
    )
