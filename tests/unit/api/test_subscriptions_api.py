"""Tests for the subscription and payment endpoints."""

import uuid

import pytest

from tierwise import crud, schemas


@pytest.fixture
async def plan_ids(db_session) -> dict:
    ids = {}
    for name, price in (("Plan 1", 100), ("Plan 2", 200), ("Plan 3", 300)):
        plan = await crud.plan.create(db_session, obj_in=schemas.PlanCreate(name=name, price=price))
        ids[name] = str(plan.id)
    return ids


async def test_subscribe_then_read_current(client, act_as, outsider_ctx, plan_ids):
    act_as(outsider_ctx)

    response = await client.post("/subscriptions", json={"plan_id": plan_ids["Plan 2"]})
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await client.post("/subscriptions", json={"plan_id": plan_ids["Plan 3"]})
    assert response.status_code == 200

    current = (await client.get("/subscriptions/current")).json()
    assert current["plan"]["name"] == "Plan 3"
    assert current["plan_price"] == 300
    assert current["subscriber_kind"] == "user"


async def test_current_without_subscription(client, act_as, outsider_ctx):
    act_as(outsider_ctx)

    response = await client.get("/subscriptions/current")

    assert response.status_code == 404


async def test_subscribe_to_unknown_plan(client, act_as, outsider_ctx):
    act_as(outsider_ctx)

    response = await client.post("/subscriptions", json={"plan_id": str(uuid.uuid4())})

    assert response.status_code == 404


async def test_subscribe_without_identity(client, plan_ids):
    response = await client.post("/subscriptions", json={"plan_id": plan_ids["Plan 1"]})

    assert response.status_code == 401


async def test_malformed_plan_id(client, act_as, outsider_ctx):
    act_as(outsider_ctx)

    response = await client.post("/subscriptions/quote", json={"plan_id": "plan-one"})

    assert response.status_code == 422


async def test_quote_without_cycle_is_full_price(client, act_as, outsider_ctx, plan_ids):
    act_as(outsider_ctx)

    response = await client.post("/subscriptions/quote", json={"plan_id": plan_ids["Plan 2"]})

    assert response.status_code == 200
    assert response.json() == {"price": 200}


async def test_quote_credits_paid_cycle(
    client, act_as, clock, admin_ctx, outsider_ctx, plan_ids
):
    act_as(outsider_ctx)
    await client.post("/subscriptions", json={"plan_id": plan_ids["Plan 1"]})
    subscription_id = (await client.get("/subscriptions/current")).json()["id"]

    act_as(admin_ctx)
    response = await client.post(
        "/payments", json={"subscription_id": subscription_id, "amount": 100}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    clock.advance(days=15)
    act_as(outsider_ctx)
    response = await client.post("/subscriptions/quote", json={"plan_id": plan_ids["Plan 2"]})

    assert response.json() == {"price": 150}


async def test_team_subscription(client, act_as, member_ctx, outsider_ctx, team, plan_ids):
    act_as(member_ctx)
    body = {"plan_id": plan_ids["Plan 2"], "team_id": str(team.id)}

    assert (await client.post("/subscriptions", json=body)).status_code == 200
    current = (await client.get("/subscriptions/current", params={"team_id": str(team.id)})).json()
    assert current["subscriber_kind"] == "team"
    assert current["subscriber_id"] == str(team.id)

    act_as(outsider_ctx)
    assert (await client.post("/subscriptions", json=body)).status_code == 403
    assert (await client.post("/subscriptions/quote", json=body)).status_code == 403


async def test_non_admin_cannot_record_payments(client, act_as, outsider_ctx):
    act_as(outsider_ctx)

    response = await client.post(
        "/payments", json={"subscription_id": str(uuid.uuid4()), "amount": 100}
    )

    assert response.status_code == 403


async def test_payment_for_unknown_subscription(client, admin_user):
    response = await client.post(
        "/payments", json={"subscription_id": str(uuid.uuid4()), "amount": 100}
    )

    assert response.status_code == 404


async def test_negative_payment(client, admin_user):
    response = await client.post(
        "/payments", json={"subscription_id": str(uuid.uuid4()), "amount": -100}
    )

    assert response.status_code == 400


async def test_payment_dated_in_the_future(client, admin_user):
    response = await client.post(
        "/payments",
        json={
            "subscription_id": str(uuid.uuid4()),
            "amount": 100,
            "paid_at": "2025-07-01T12:00:00",
        },
    )

    assert response.status_code == 400
