"""Pure business logic for plan pricing.

This module contains the pricing rules for plan changes, separated from
infrastructure concerns like the database and the API layer.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from tierwise.core.datetime_utils import to_naive_utc

BILLING_CYCLE_DAYS = 30


@dataclass(frozen=True)
class CurrentCycle:
    """The paid cycle a subscriber is currently in."""

    plan_price_paid: int
    cycle_start: datetime
    cycle_end: datetime


def cycle_end_from(cycle_start: datetime, cycle_days: int = BILLING_CYCLE_DAYS) -> datetime:
    """Calculate the end of a cycle that starts at `cycle_start`."""
    return cycle_start + timedelta(days=cycle_days)


def remaining_whole_days(cycle_end: datetime, now: datetime) -> int:
    """Count the whole days left until `cycle_end`.

    The difference is taken on absolute time, so month lengths and timezones do not
    matter. Partial days are dropped; an elapsed cycle has zero days left.
    """
    remaining = to_naive_utc(cycle_end) - to_naive_utc(now)
    if remaining <= timedelta(0):
        return 0
    return remaining // timedelta(days=1)


def unused_credit(
    current_plan_price_paid: int,
    remaining_days: int,
    cycle_days: int = BILLING_CYCLE_DAYS,
) -> int:
    """Value of the unused part of the current cycle, floored to whole units."""
    remaining_days = max(0, remaining_days)
    return (remaining_days * current_plan_price_paid) // cycle_days


def compute_upgrade_price(
    target_plan_price: int,
    current_plan_price_paid: Optional[int],
    cycle_end: Optional[datetime],
    now: datetime,
    cycle_days: int = BILLING_CYCLE_DAYS,
) -> int:
    """Compute the price to charge for switching to a plan now.

    The unused part of the current cycle, valued at the price actually paid for it,
    is credited against the full price of the target plan:

        price = target_plan_price - floor(remaining_days * current_plan_price_paid / cycle_days)

    Args:
        target_plan_price: Full cycle price of the plan being switched to.
        current_plan_price_paid: Price paid for the current cycle, None without a cycle.
        cycle_end: End of the current paid cycle, None without a cycle.
        now: The moment of the switch.
        cycle_days: Length of a billing cycle in days.

    Returns:
        The price in whole units. Never negative: a credit larger than the target
        price brings the charge down to zero.
    """
    if cycle_end is None or current_plan_price_paid is None:
        return target_plan_price

    days_left = remaining_whole_days(cycle_end, now)
    if days_left == 0:
        return target_plan_price

    price = target_plan_price - unused_credit(current_plan_price_paid, days_left, cycle_days)
    return max(price, 0)


def quote_for_cycle(
    target_plan_price: int,
    cycle: Optional[CurrentCycle],
    now: datetime,
    cycle_days: int = BILLING_CYCLE_DAYS,
) -> int:
    """Compute the upgrade price against a resolved cycle, or the full price without one."""
    if cycle is None:
        return target_plan_price
    return compute_upgrade_price(
        target_plan_price,
        cycle.plan_price_paid,
        cycle.cycle_end,
        now,
        cycle_days,
    )
