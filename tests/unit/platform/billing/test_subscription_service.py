"""Unit tests for the subscription lifecycle service."""

import uuid
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from tierwise import crud, schemas
from tierwise.core.exceptions import (
    InvalidInputError,
    PermissionException,
    PlanNotFoundException,
    SubscriptionConflictError,
    SubscriptionNotFoundException,
)
from tierwise.platform.billing.cycle_resolver import PaymentCycleResolver, ValidToCycleResolver
from tierwise.platform.billing.subscription_service import SubscriptionService
from tests.fixtures.common import FakeClock

START = datetime(2025, 4, 1, 8, 0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def service(clock) -> SubscriptionService:
    return SubscriptionService(cycle_resolver=PaymentCycleResolver(30), clock=clock)


@pytest.fixture
def valid_to_service(clock) -> SubscriptionService:
    return SubscriptionService(cycle_resolver=ValidToCycleResolver(30), clock=clock)


@pytest.fixture
async def plans(db_session) -> dict:
    """Plans 1, 2 and 3 priced 100, 200 and 300."""
    created = {}
    for number, price in ((1, 100), (2, 200), (3, 300)):
        created[number] = await crud.plan.create(
            db_session, obj_in=schemas.PlanCreate(name=f"Plan {number}", price=price)
        )
    return created


def _me(ctx) -> schemas.Subscriber:
    return schemas.Subscriber(kind=schemas.SubscriberKind.USER, id=ctx.user_id)


async def _pay_active(db, subscriber, amount, paid_at):
    active = await crud.subscription.get_active(db, subscriber=subscriber)
    return await crud.payment.create(
        db,
        obj_in={
            "subscription_id": active.id,
            "amount": amount,
            "status": schemas.PaymentStatus.CONFIRMED.value,
            "paid_at": paid_at,
        },
    )


class TestSubscribe:
    async def test_switching_leaves_exactly_one_active_subscription(
        self, db_session, service, plans, outsider_ctx
    ):
        await service.subscribe(db_session, plans[2].id, outsider_ctx)
        await service.subscribe(db_session, plans[3].id, outsider_ctx)

        history = await crud.subscription.get_by_subscriber(
            db_session, subscriber=_me(outsider_ctx)
        )
        active = [s for s in history if not s.is_cancelled]

        assert len(history) == 2
        assert len(active) == 1
        assert active[0].plan_id == plans[3].id
        assert active[0].plan_price == 300

    async def test_first_subscription(self, db_session, service, plans, outsider_ctx):
        result = await service.subscribe(db_session, plans[1].id, outsider_ctx)

        assert result.success is True
        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))
        assert active.plan_id == plans[1].id
        assert active.valid_to is None

    async def test_unknown_plan_changes_nothing(self, db_session, service, plans, outsider_ctx):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)

        with pytest.raises(PlanNotFoundException):
            await service.subscribe(db_session, uuid.uuid4(), outsider_ctx)

        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))
        assert active.plan_id == plans[1].id

    async def test_valid_to_is_set_one_cycle_ahead(
        self, db_session, valid_to_service, plans, outsider_ctx
    ):
        await valid_to_service.subscribe(db_session, plans[1].id, outsider_ctx)

        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))
        assert active.valid_to == START + timedelta(days=30)

    async def test_subscribing_for_a_team(self, db_session, service, plans, member_ctx, team):
        await service.subscribe(db_session, plans[2].id, member_ctx, team_id=team.id)

        team_subscriber = schemas.Subscriber(kind=schemas.SubscriberKind.TEAM, id=team.id)
        assert (await crud.subscription.get_active(db_session, subscriber=team_subscriber))
        # The member's own subscription is untouched
        assert await crud.subscription.get_active(db_session, subscriber=_me(member_ctx)) is None

    async def test_non_member_cannot_subscribe_a_team(
        self, db_session, service, plans, outsider_ctx, team
    ):
        with pytest.raises(PermissionException):
            await service.subscribe(db_session, plans[2].id, outsider_ctx, team_id=team.id)

    async def test_concurrent_switch_is_reported_as_conflict(
        self, db_session, service, plans, outsider_ctx
    ):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)

        # Another request activated a subscription after our cancel ran
        with patch.object(crud.subscription, "cancel_active", AsyncMock(return_value=0)):
            with pytest.raises(SubscriptionConflictError):
                await service.subscribe(db_session, plans[2].id, outsider_ctx)

        history = await crud.subscription.get_by_subscriber(
            db_session, subscriber=_me(outsider_ctx)
        )
        assert [s.plan_id for s in history] == [plans[1].id]
        assert not history[0].is_cancelled


class TestQuoteUpgrade:
    async def test_at_start_of_paid_cycle(self, db_session, service, plans, outsider_ctx):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        await _pay_active(db_session, _me(outsider_ctx), 100, START)

        quote = await service.quote_upgrade(db_session, plans[2].id, outsider_ctx)

        assert quote.price == 100

    async def test_fifteen_days_left(self, db_session, service, clock, plans, outsider_ctx):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        await _pay_active(db_session, _me(outsider_ctx), 100, START)
        clock.advance(days=15)

        quote = await service.quote_upgrade(db_session, plans[2].id, outsider_ctx)

        assert quote.price == 150

    async def test_without_cycle_quotes_full_price(
        self, db_session, service, plans, outsider_ctx
    ):
        quote = await service.quote_upgrade(db_session, plans[3].id, outsider_ctx)

        assert quote.price == 300

    async def test_cycle_paid_before_a_switch_still_credits(
        self, db_session, service, clock, plans, outsider_ctx
    ):
        """The payment for plan 1 keeps crediting after switching to the unpaid plan 2."""
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        await _pay_active(db_session, _me(outsider_ctx), 100, START)
        await service.subscribe(db_session, plans[2].id, outsider_ctx)
        clock.advance(days=3)

        quote = await service.quote_upgrade(db_session, plans[3].id, outsider_ctx)

        assert quote.price == 210

    async def test_expired_cycle_quotes_full_price(
        self, db_session, service, clock, plans, outsider_ctx
    ):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        await _pay_active(db_session, _me(outsider_ctx), 100, START)
        clock.advance(days=31)

        quote = await service.quote_upgrade(db_session, plans[2].id, outsider_ctx)

        assert quote.price == 200

    async def test_downgrade_is_free(self, db_session, service, clock, plans, outsider_ctx):
        await service.subscribe(db_session, plans[3].id, outsider_ctx)
        await _pay_active(db_session, _me(outsider_ctx), 300, START)
        clock.advance(days=1)

        quote = await service.quote_upgrade(db_session, plans[1].id, outsider_ctx)

        assert quote.price == 0

    async def test_repricing_does_not_change_credit(
        self, db_session, valid_to_service, clock, plans, outsider_ctx
    ):
        await valid_to_service.subscribe(db_session, plans[1].id, outsider_ctx)
        await crud.plan.update(db_session, db_obj=plans[1], obj_in={"price": 1000})
        clock.advance(days=15)

        quote = await valid_to_service.quote_upgrade(db_session, plans[2].id, outsider_ctx)

        # Credit is 15 days of the 100 charged, not of the new price
        assert quote.price == 150

    async def test_quote_changes_nothing(self, db_session, service, plans, outsider_ctx):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)

        await service.quote_upgrade(db_session, plans[2].id, outsider_ctx)

        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))
        assert active.plan_id == plans[1].id

    async def test_unknown_plan(self, db_session, service, outsider_ctx):
        with pytest.raises(PlanNotFoundException):
            await service.quote_upgrade(db_session, uuid.uuid4(), outsider_ctx)

    async def test_team_quote_uses_team_cycle(
        self, db_session, service, clock, plans, member_ctx, team
    ):
        await service.subscribe(db_session, plans[1].id, member_ctx, team_id=team.id)
        team_subscriber = schemas.Subscriber(kind=schemas.SubscriberKind.TEAM, id=team.id)
        await _pay_active(db_session, team_subscriber, 100, START)
        clock.advance(days=10)

        team_quote = await service.quote_upgrade(db_session, plans[2].id, member_ctx, team.id)
        own_quote = await service.quote_upgrade(db_session, plans[2].id, member_ctx)

        assert team_quote.price == 134
        assert own_quote.price == 200


class TestGetCurrentSubscription:
    async def test_returns_active_subscription_with_plan(
        self, db_session, service, plans, outsider_ctx
    ):
        await service.subscribe(db_session, plans[2].id, outsider_ctx)

        current = await service.get_current_subscription(db_session, outsider_ctx)

        assert current.plan.name == "Plan 2"
        assert current.subscriber_kind == schemas.SubscriberKind.USER
        assert current.is_cancelled is False

    async def test_no_active_subscription(self, db_session, service, outsider_ctx):
        with pytest.raises(SubscriptionNotFoundException):
            await service.get_current_subscription(db_session, outsider_ctx)


class TestRecordPayment:
    async def test_admin_records_payment(
        self, db_session, service, clock, plans, admin_ctx, outsider_ctx
    ):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))

        payment = await service.record_payment(
            db_session, schemas.PaymentCreate(subscription_id=active.id, amount=100), admin_ctx
        )

        assert payment.status == schemas.PaymentStatus.CONFIRMED
        assert payment.paid_at == START
        clock.advance(days=15)
        quote = await service.quote_upgrade(db_session, plans[2].id, outsider_ctx)
        assert quote.price == 150

    async def test_non_admin_is_rejected(self, mock_db, service, outsider_ctx):
        with pytest.raises(PermissionException):
            await service.record_payment(
                mock_db,
                schemas.PaymentCreate(subscription_id=uuid.uuid4(), amount=100),
                outsider_ctx,
            )

        mock_db.execute.assert_not_awaited()

    async def test_negative_amount(self, db_session, service, admin_ctx):
        with pytest.raises(InvalidInputError):
            await service.record_payment(
                db_session,
                schemas.PaymentCreate(subscription_id=uuid.uuid4(), amount=-1),
                admin_ctx,
            )

    async def test_unknown_subscription(self, db_session, service, admin_ctx):
        with pytest.raises(SubscriptionNotFoundException):
            await service.record_payment(
                db_session,
                schemas.PaymentCreate(subscription_id=uuid.uuid4(), amount=10),
                admin_ctx,
            )

    async def test_payment_dated_in_the_future_is_rejected(
        self, db_session, service, plans, admin_ctx, outsider_ctx
    ):
        await service.subscribe(db_session, plans[1].id, outsider_ctx)
        active = await crud.subscription.get_active(db_session, subscriber=_me(outsider_ctx))

        with pytest.raises(InvalidInputError):
            await service.record_payment(
                db_session,
                schemas.PaymentCreate(
                    subscription_id=active.id, amount=100, paid_at=START + timedelta(days=1)
                ),
                admin_ctx,
            )

        assert await crud.payment.get_latest_confirmed_for_subscriber(
            db_session, subscriber=_me(outsider_ctx)
        ) is None
