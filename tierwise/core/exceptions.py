"""Shared exceptions module."""

from typing import Optional

from pydantic import ValidationError


class TierwiseException(Exception):
    """Base exception for Tierwise services."""

    pass


class PermissionException(TierwiseException):
    """Exception raised when a user does not have the necessary permissions to perform an action."""

    def __init__(
        self,
        message: Optional[str] = "User does not have the right to perform this action",
    ):
        """Create a new PermissionException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class NotFoundException(TierwiseException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class PlanNotFoundException(NotFoundException):
    """Raised when a plan is not found."""

    pass


class SubscriptionNotFoundException(NotFoundException):
    """Raised when a subscription is not found."""

    pass


class ImmutableFieldError(TierwiseException):
    """Exception raised for attempts to modify immutable fields in a database model."""

    def __init__(self, field_name: str, message: str = "Cannot modify immutable field"):
        """Create a new ImmutableFieldError instance.

        Args:
        ----
            field_name (str): The name of the immutable field.
            message (str, optional): The error message. Has default message.

        """
        self.field_name = field_name
        self.message = message
        super().__init__(f"{message}: {field_name}")


class InvalidInputError(TierwiseException):
    """Exception raised when caller-supplied data violates a domain constraint."""

    def __init__(self, message: Optional[str] = "Invalid input"):
        """Create a new InvalidInputError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class NameConflictError(TierwiseException):
    """Exception raised when a name is already taken by another object."""

    def __init__(self, name: str, message: str = "Name is already taken"):
        """Create a new NameConflictError instance.

        Args:
        ----
            name (str): The conflicting name.
            message (str, optional): The error message. Has default message.

        """
        self.name = name
        self.message = message
        super().__init__(f"{message}: {name}")


class SubscriptionConflictError(TierwiseException):
    """Raised when a concurrent change would leave a subscriber with two active subscriptions."""

    def __init__(
        self,
        message: Optional[str] = "Subscription was changed concurrently, please retry",
    ):
        """Create a new SubscriptionConflictError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


def unpack_validation_error(exc: ValidationError) -> dict:
    """Unpack a Pydantic validation error into a dictionary.

    Args:
    ----
        exc (ValidationError): The Pydantic validation error.

    Returns:
    -------
        dict: The dictionary representation of the validation error.

    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"]
        error_messages.append({field: message})

    return {"errors": error_messages}
