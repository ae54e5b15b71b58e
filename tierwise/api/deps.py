"""Dependencies that are used in the API endpoints."""

import uuid
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, Request
from fastapi_auth0 import Auth0User
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import crud, schemas
from tierwise.api.auth import auth0
from tierwise.api.context import ApiContext
from tierwise.core.config import settings
from tierwise.core.logging import logger
from tierwise.db.session import get_db
from tierwise.platform.billing.subscription_service import get_subscription_service

__all__ = ["get_context", "get_db", "get_subscription_service"]


def _to_user_schema(user) -> schemas.User:
    # team_ids is a model property over the eagerly loaded memberships
    return schemas.User.model_validate(user, from_attributes=True)


async def _authenticate_system_user(db: AsyncSession) -> Tuple[Optional[schemas.User], str, dict]:
    """Authenticate system user when auth is disabled."""
    user = await crud.user.get_by_email(db, email=settings.FIRST_SUPERUSER)
    if user:
        return _to_user_schema(user), "system", {"disabled_auth": True}
    return None, "", {}


async def _authenticate_auth0_user(
    db: AsyncSession, auth0_user: Auth0User
) -> Tuple[Optional[schemas.User], str, dict]:
    """Authenticate Auth0 user."""
    user = await crud.user.get_by_email(db, email=auth0_user.email)
    if user is None:
        logger.error(f"User {auth0_user.email} not found in database")
        return None, "", {}
    if not user.is_active:
        logger.warning(f"Inactive user {auth0_user.email} tried to authenticate")
        return None, "", {}
    return _to_user_schema(user), "auth0", {"auth0_id": auth0_user.id}


async def get_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
    auth0_user: Optional[Auth0User] = Depends(auth0.get_user),
) -> ApiContext:
    """Create unified API context for the request.

    This is the dependency for every endpoint that needs a caller identity, providing:
    - Request tracking (request_id)
    - The authenticated user, including the teams they belong to
    - Pre-configured contextual logger with all dimensions

    Args:
    ----
        request (Request): The FastAPI request object.
        db (AsyncSession): Database session.
        auth0_user (Optional[Auth0User]): User details from Auth0.

    Returns:
    -------
        ApiContext: Unified API context with auth and logging.

    Raises:
    ------
        HTTPException: If no valid authentication is provided.
    """
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))

    user_context = None
    auth_method = ""
    auth_metadata = {}

    if not settings.AUTH_ENABLED:
        user_context, auth_method, auth_metadata = await _authenticate_system_user(db)
    elif auth0_user:
        user_context, auth_method, auth_metadata = await _authenticate_auth0_user(db, auth0_user)

    if user_context is None:
        raise HTTPException(status_code=401, detail="No valid authentication provided")

    base_logger = logger.with_context(
        request_id=request_id,
        auth_method=auth_method,
        user_id=str(user_context.id),
        user_email=user_context.email,
        context_base="api",
    )

    return ApiContext(
        request_id=request_id,
        user=user_context,
        auth_method=auth_method,
        auth_metadata=auth_metadata,
        logger=base_logger,
    )

