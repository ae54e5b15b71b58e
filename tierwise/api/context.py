"""Unified application context for API requests.

This module provides a comprehensive context object that combines authentication,
logging, and request metadata into a single injectable dependency.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel

from tierwise import schemas
from tierwise.core.exceptions import PermissionException
from tierwise.core.logging import ContextualLogger


class ApiContext(BaseModel):
    """Unified context for API requests.

    Combines the authenticated user, logging, and request metadata into a single
    context object that can be injected into endpoints via FastAPI dependencies.
    Services call the capability checks on this object before touching storage.
    """

    # Request metadata
    request_id: str

    # Authentication context
    user: schemas.User
    auth_method: str  # "auth0", "system"
    auth_metadata: Optional[Dict[str, Any]] = None

    # Contextual logger with all dimensions pre-configured
    logger: ContextualLogger

    class Config:
        """Pydantic configuration."""

        arbitrary_types_allowed = True  # For ContextualLogger

    @property
    def user_id(self) -> UUID:
        """Id of the authenticated user."""
        return self.user.id

    @property
    def is_admin(self) -> bool:
        """Whether the caller may manage the plan catalog."""
        return self.user.is_superuser

    def require_admin(self) -> None:
        """Raise unless the caller has the admin capability.

        Raises:
            PermissionException: If the user is not an admin.
        """
        if not self.is_admin:
            raise PermissionException("Only administrators can manage plans")

    def resolve_subscriber(self, team_id: Optional[UUID] = None) -> schemas.Subscriber:
        """Resolve whom a subscription request acts for.

        Args:
            team_id: Team to act for. Without it the caller acts for themselves.

        Returns:
            The subscriber reference.

        Raises:
            PermissionException: If the caller is not a member of the team.
        """
        if team_id is None:
            return schemas.Subscriber(kind=schemas.SubscriberKind.USER, id=self.user.id)

        if team_id not in self.user.team_ids:
            raise PermissionException(f"User is not a member of team {team_id}")
        return schemas.Subscriber(kind=schemas.SubscriberKind.TEAM, id=team_id)

    def __str__(self) -> str:
        """String representation for logging."""
        return (
            f"ApiContext(request_id={self.request_id[:8]}..., "
            f"method={self.auth_method}, user={self.user.email})"
        )
