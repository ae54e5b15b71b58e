"""CRUD operations for the application."""

from .crud_payment import payment
from .crud_plan import plan
from .crud_subscription import subscription
from .crud_user import user

__all__ = [
    "payment",
    "plan",
    "subscription",
    "user",
]
