"""Models for the application."""

from .payment import Payment
from .plan import Plan
from .subscription import Subscription
from .team import Team
from .user import User
from .user_team import UserTeam

# flake8: noqa: F401
