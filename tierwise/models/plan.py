"""Plan model."""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import CheckConstraint

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.subscription import Subscription


class Plan(Base):
    """A named, priced subscription tier."""

    __tablename__ = "plan"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    # Whole monetary units
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    subscriptions: Mapped[List["Subscription"]] = relationship(
        "Subscription", back_populates="plan", lazy="noload"
    )

    __table_args__ = (CheckConstraint("price >= 0", name="check_plan_price_non_negative"),)
