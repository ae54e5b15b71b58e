"""Fixtures for exercising the HTTP API against the in-memory database."""

from datetime import datetime

import httpx
import pytest

from tierwise.api import deps
from tierwise.main import app
from tierwise.platform.billing.cycle_resolver import PaymentCycleResolver
from tierwise.platform.billing.subscription_service import SubscriptionService
from tests.fixtures.common import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0))


@pytest.fixture
async def client(db_session, clock):
    """HTTP client whose requests share the test database session.

    Authentication runs for real: with AUTH_ENABLED off, requests act as the first
    superuser if it exists. Use `act_as` to impersonate someone else.
    """

    async def override_get_db():
        yield db_session

    service = SubscriptionService(cycle_resolver=PaymentCycleResolver(30), clock=clock)
    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_subscription_service] = lambda: service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def act_as():
    """Make subsequent requests run with the given context."""

    def _act_as(ctx):
        app.dependency_overrides[deps.get_context] = lambda: ctx

    return _act_as
