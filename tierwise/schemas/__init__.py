"""Schemas for the application."""

from .common import SuccessResponse
from .payment import Payment, PaymentCreate, PaymentInDBBase, PaymentStatus
from .plan import Plan, PlanCreate, PlanInDBBase, PlanList, PlanUpdate
from .subscription import (
    Subscriber,
    SubscriberKind,
    Subscription,
    SubscriptionCreate,
    SubscriptionInDBBase,
    SubscriptionRequest,
    SubscriptionWithPlan,
    UpgradeQuote,
)
from .user import User, UserCreate, UserInDBBase

# flake8: noqa: F401
