"""Resolution of a subscriber's current paid cycle.

Deployments record the end of a cycle in one of two ways:

- ``payments``: every confirmed payment opens a cycle that starts at its ``paid_at``.
- ``valid_to``: the subscription row carries the cycle end directly, set when it is created.

The lifecycle manager only sees `CycleResolver`, so it does not care which one is in use.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import crud
from tierwise.core.config import settings
from tierwise.core.logging import logger
from tierwise.platform.billing.plan_logic import CurrentCycle, cycle_end_from
from tierwise.schemas.subscription import Subscriber


class CycleResolver(ABC):
    """Finds the cycle a subscriber last paid for."""

    def __init__(self, cycle_days: int):
        """Initialize the resolver with the billing cycle length in days."""
        self.cycle_days = cycle_days

    @abstractmethod
    async def get_current_cycle(
        self, db: AsyncSession, subscriber: Subscriber
    ) -> Optional[CurrentCycle]:
        """Return the subscriber's current cycle, or None if there is none.

        The price on the cycle is the one paid at the time, not the plan's current price.
        """

    def initial_valid_to(self, now: datetime) -> Optional[datetime]:
        """Return the cycle end to store on a subscription created at `now`.

        None leaves `valid_to` empty, for deployments where payments open the cycle.
        """
        return None


class PaymentCycleResolver(CycleResolver):
    """Derives the cycle from the subscriber's latest confirmed payment.

    The payment may belong to a subscription that has since been cancelled by a plan
    switch. The cycle it opened is still paid for and is credited on the next switch.
    """

    async def get_current_cycle(
        self, db: AsyncSession, subscriber: Subscriber
    ) -> Optional[CurrentCycle]:
        """Return the cycle opened by the subscriber's latest confirmed payment."""
        active = await crud.subscription.get_active(db, subscriber=subscriber)
        if active is None:
            return None

        payment = await crud.payment.get_latest_confirmed_for_subscriber(
            db, subscriber=subscriber
        )
        if payment is None:
            logger.debug(f"{subscriber} has no confirmed payment")
            return None

        return CurrentCycle(
            plan_price_paid=payment.amount,
            cycle_start=payment.paid_at,
            cycle_end=cycle_end_from(payment.paid_at, self.cycle_days),
        )


class ValidToCycleResolver(CycleResolver):
    """Reads the cycle end stored on the active subscription."""

    async def get_current_cycle(
        self, db: AsyncSession, subscriber: Subscriber
    ) -> Optional[CurrentCycle]:
        """Return the cycle ending at the active subscription's `valid_to`."""
        active = await crud.subscription.get_active(db, subscriber=subscriber)
        if active is None or active.valid_to is None:
            return None

        return CurrentCycle(
            plan_price_paid=active.plan_price,
            cycle_start=active.valid_to - timedelta(days=self.cycle_days),
            cycle_end=active.valid_to,
        )

    def initial_valid_to(self, now: datetime) -> Optional[datetime]:
        """A new subscription is valid for one cycle from its creation."""
        return cycle_end_from(now, self.cycle_days)


def get_cycle_resolver(
    source: Optional[str] = None, cycle_days: Optional[int] = None
) -> CycleResolver:
    """Build the resolver configured for this deployment.

    Args:
        source: "payments" or "valid_to"; defaults to SUBSCRIPTION_CYCLE_SOURCE.
        cycle_days: Cycle length in days; defaults to BILLING_CYCLE_DAYS.

    Raises:
        ValueError: If the source is unknown.
    """
    source = source or settings.SUBSCRIPTION_CYCLE_SOURCE
    cycle_days = cycle_days or settings.BILLING_CYCLE_DAYS

    if source == "payments":
        return PaymentCycleResolver(cycle_days)
    if source == "valid_to":
        return ValidToCycleResolver(cycle_days)
    raise ValueError(f"Unknown subscription cycle source: {source}")
