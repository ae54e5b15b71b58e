"""Authentication module for the API.

With AUTH_ENABLED, bearer tokens are verified against the configured Auth0 tenant. Without
it, every request is attributed to the first superuser, which is how local deployments
get an administrator that can manage the plan catalog.
"""

from fastapi_auth0 import Auth0, Auth0User

from tierwise.core.config import settings
from tierwise.core.logging import logger


class MockAuth0:
    """Stands in for `Auth0` when authentication is disabled. Makes no network calls."""

    domain = "mock-domain.auth0.com"
    audience = "https://mock-api/"
    algorithms = ["RS256"]
    auth0_user_model = Auth0User

    async def get_user(self) -> Auth0User:
        """Resolve every request to the first superuser."""
        return Auth0User(sub="mock-user-id", email=settings.FIRST_SUPERUSER)


if settings.AUTH_ENABLED:
    auth0 = Auth0(
        domain=settings.AUTH0_DOMAIN,
        api_audience=settings.AUTH0_AUDIENCE,
        auto_error=False,
    )
else:
    auth0 = MockAuth0()
    logger.info(f"AUTH_ENABLED=False, acting as {settings.FIRST_SUPERUSER} for every request")
