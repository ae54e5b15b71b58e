"""User model."""

from typing import TYPE_CHECKING, List
from uuid import UUID

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.user_team import UserTeam


class User(Base):
    """User model."""

    __tablename__ = "user"

    full_name: Mapped[str] = mapped_column(String, nullable=True)
    email: Mapped[str] = mapped_column(String, unique=True)
    auth0_id: Mapped[str] = mapped_column(String, unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_superuser: Mapped[bool] = mapped_column(Boolean, default=False)

    # Many-to-many relationship with teams
    user_teams: Mapped[List["UserTeam"]] = relationship(
        "UserTeam", back_populates="user", cascade="all, delete-orphan", lazy="noload"
    )

    @property
    def team_ids(self) -> list[UUID]:
        """Ids of the teams the user belongs to."""
        return [user_team.team_id for user_team in self.user_teams]
