"""Team model."""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.user_team import UserTeam


class Team(Base):
    """A group of users that can hold a subscription together."""

    __tablename__ = "team"

    name: Mapped[str] = mapped_column(String, nullable=False)

    user_teams: Mapped[List["UserTeam"]] = relationship(
        "UserTeam", back_populates="team", cascade="all, delete-orphan", lazy="noload"
    )
