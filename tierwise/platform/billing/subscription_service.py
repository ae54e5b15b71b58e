"""Subscription lifecycle service.

This module coordinates plan switches by orchestrating between the pricing
logic, the cycle resolver and the subscription storage.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tierwise import crud, schemas
from tierwise.api.context import ApiContext
from tierwise.core.config import settings
from tierwise.core.datetime_utils import to_naive_utc, utc_now_naive
from tierwise.core.exceptions import (
    InvalidInputError,
    PlanNotFoundException,
    SubscriptionConflictError,
    SubscriptionNotFoundException,
)
from tierwise.db.unit_of_work import UnitOfWork
from tierwise.models import Plan
from tierwise.platform.billing.cycle_resolver import CycleResolver, get_cycle_resolver
from tierwise.platform.billing.plan_logic import quote_for_cycle


class SubscriptionService:
    """Service for switching subscribers between plans.

    A subscriber has at most one active subscription. Subscribing cancels it and
    activates the new one in a single transaction; quoting is read-only.
    """

    def __init__(
        self,
        cycle_resolver: Optional[CycleResolver] = None,
        clock: Callable[[], datetime] = utc_now_naive,
    ):
        """Initialize the subscription service.

        Args:
            cycle_resolver: Source of the subscriber's current cycle. Defaults to the
                resolver configured by SUBSCRIPTION_CYCLE_SOURCE.
            clock: Returns the current time as naive UTC.
        """
        self.cycle_resolver = cycle_resolver or get_cycle_resolver()
        self.clock = clock

    @property
    def cycle_days(self) -> int:
        """Length of a billing cycle in days."""
        return self.cycle_resolver.cycle_days

    async def _get_plan(self, db: AsyncSession, plan_id: UUID) -> Plan:
        plan = await crud.plan.get(db, id=plan_id)
        if plan is None:
            raise PlanNotFoundException(f"Plan {plan_id} not found")
        return plan

    async def quote_upgrade(
        self,
        db: AsyncSession,
        plan_id: UUID,
        ctx: ApiContext,
        team_id: Optional[UUID] = None,
    ) -> schemas.UpgradeQuote:
        """Quote the price of switching to a plan now.

        The unused part of the subscriber's current cycle is credited against the
        target plan's price. Without a current cycle the full price is quoted.

        Raises:
            PermissionException: If the caller may not act for the team.
            PlanNotFoundException: If the target plan does not exist.
        """
        subscriber = ctx.resolve_subscriber(team_id)
        plan = await self._get_plan(db, plan_id)

        cycle = await self.cycle_resolver.get_current_cycle(db, subscriber)
        price = quote_for_cycle(plan.price, cycle, self.clock(), self.cycle_days)

        ctx.logger.with_context(subscriber=str(subscriber), plan_id=str(plan_id)).info(
            f"Quoted {price} for switching to plan '{plan.name}' "
            f"({'no current cycle' if cycle is None else f'cycle ends {cycle.cycle_end}'})"
        )
        return schemas.UpgradeQuote(price=price)

    async def subscribe(
        self,
        db: AsyncSession,
        plan_id: UUID,
        ctx: ApiContext,
        team_id: Optional[UUID] = None,
    ) -> schemas.SuccessResponse:
        """Switch the subscriber to a plan.

        Cancels every active subscription of the subscriber and inserts a new active
        one, both in one transaction.

        Raises:
            PermissionException: If the caller may not act for the team.
            PlanNotFoundException: If the plan does not exist.
            SubscriptionConflictError: If a concurrent switch for the same subscriber
                committed first. Nothing is changed in that case.
        """
        subscriber = ctx.resolve_subscriber(team_id)
        plan = await self._get_plan(db, plan_id)
        log = ctx.logger.with_context(subscriber=str(subscriber), plan_id=str(plan_id))

        valid_to = self.cycle_resolver.initial_valid_to(self.clock())

        try:
            async with UnitOfWork(db) as uow:
                # Lock the active row so concurrent switches queue behind each other
                await crud.subscription.get_active(db, subscriber=subscriber, for_update=True)
                cancelled = await crud.subscription.cancel_active(
                    db, subscriber=subscriber, uow=uow
                )
                await crud.subscription.create(
                    db,
                    obj_in=schemas.SubscriptionCreate(
                        subscriber_kind=subscriber.kind,
                        subscriber_id=subscriber.id,
                        plan_id=plan.id,
                        plan_price=plan.price,
                        valid_to=valid_to,
                    ),
                    uow=uow,
                )
        except IntegrityError as e:
            log.warning(f"Concurrent subscription change detected: {e.orig}")
            raise SubscriptionConflictError() from e

        log.info(
            f"Subscribed to plan '{plan.name}', cancelled {cancelled} previous subscription(s)"
        )
        return schemas.SuccessResponse()

    async def get_current_subscription(
        self,
        db: AsyncSession,
        ctx: ApiContext,
        team_id: Optional[UUID] = None,
    ) -> schemas.SubscriptionWithPlan:
        """Get the subscriber's active subscription with its plan.

        Raises:
            PermissionException: If the caller may not act for the team.
            SubscriptionNotFoundException: If there is no active subscription.
        """
        subscriber = ctx.resolve_subscriber(team_id)
        active = await crud.subscription.get_active(db, subscriber=subscriber, with_plan=True)
        if active is None:
            raise SubscriptionNotFoundException(f"No active subscription for {subscriber}")
        return schemas.SubscriptionWithPlan.model_validate(active, from_attributes=True)

    async def record_payment(
        self,
        db: AsyncSession,
        payment_in: schemas.PaymentCreate,
        ctx: ApiContext,
    ) -> schemas.Payment:
        """Record a payment event reported by the payment provider.

        A confirmed payment opens a new cycle for the subscription, starting at
        `paid_at` (the time of recording when omitted).

        Raises:
            PermissionException: If the caller is not an admin.
            InvalidInputError: If the amount is negative or `paid_at` lies in the future.
            SubscriptionNotFoundException: If the subscription does not exist.
        """
        ctx.require_admin()
        if payment_in.amount < 0:
            raise InvalidInputError(
                f"Payment amount must not be negative, got {payment_in.amount}"
            )

        now = self.clock()
        paid_at = to_naive_utc(payment_in.paid_at) if payment_in.paid_at else now
        if paid_at > now:
            raise InvalidInputError(f"Payment time {paid_at} lies in the future")

        subscription = await crud.subscription.get(db, id=payment_in.subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundException(
                f"Subscription {payment_in.subscription_id} not found"
            )

        payment = await crud.payment.create(
            db,
            obj_in={
                "subscription_id": subscription.id,
                "amount": payment_in.amount,
                "status": payment_in.status.value,
                "paid_at": paid_at,
            },
        )

        ctx.logger.with_context(subscription_id=str(subscription.id)).info(
            f"Recorded {payment_in.status.value} payment of {payment_in.amount}"
        )
        return schemas.Payment.model_validate(payment, from_attributes=True)


_subscription_service: Optional[SubscriptionService] = None


def get_subscription_service() -> SubscriptionService:
    """Return the process-wide service built from settings.

    Created on first use so that settings overrides made before startup are honored.
    """
    global _subscription_service
    if _subscription_service is None:
        _subscription_service = SubscriptionService(
            get_cycle_resolver(settings.SUBSCRIPTION_CYCLE_SOURCE, settings.BILLING_CYCLE_DAYS)
        )
    return _subscription_service
