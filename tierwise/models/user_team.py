"""User Team relationship model."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tierwise.models._base import Base

if TYPE_CHECKING:
    from tierwise.models.team import Team
    from tierwise.models.user import User


class UserTeam(Base):
    """Many-to-many relationship between users and teams with roles."""

    __tablename__ = "user_team"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("user.id"), nullable=False)
    team_id: Mapped[UUID] = mapped_column(ForeignKey("team.id"), nullable=False)
    role: Mapped[str] = mapped_column(String, default="member", nullable=False)  # owner, member

    user: Mapped["User"] = relationship("User", back_populates="user_teams", lazy="noload")
    team: Mapped["Team"] = relationship("Team", back_populates="user_teams", lazy="noload")

    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_user_team"),)
