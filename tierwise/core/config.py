"""Configuration settings for the Tierwise backend.

Wraps environment variables and provides defaults.
"""

from typing import Literal, Optional

from pydantic import PostgresDsn, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pydantic settings class.

    Attributes:
    ----------
        PROJECT_NAME (str): The name of the project.
        LOCAL_DEVELOPMENT (bool): Whether the application is running locally.
        ENVIRONMENT (str): The deployment environment (local, dev, test, prod).
        DEBUG (bool): Whether debug mode is enabled.
        LOG_LEVEL (str): The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        FIRST_SUPERUSER (str): The email address of the first superuser.
        AUTH_ENABLED (bool): Whether Auth0 authentication is enforced.
        AUTH0_DOMAIN (Optional[str]): The Auth0 tenant domain.
        AUTH0_AUDIENCE (Optional[str]): The Auth0 API audience.
        POSTGRES_HOST (str): The PostgreSQL server hostname.
        POSTGRES_DB (str): The PostgreSQL database name.
        POSTGRES_USER (str): The PostgreSQL username.
        POSTGRES_PASSWORD (str): The PostgreSQL password.
        SQLALCHEMY_ASYNC_DATABASE_URI (Optional[str]): The SQLAlchemy async database URI.
        RUN_ALEMBIC_MIGRATIONS (bool): Whether to run the alembic migrations on startup.
        RUN_DB_INIT (bool): Whether to create the first superuser on startup.
        BILLING_CYCLE_DAYS (int): Length of a paid billing cycle in days.
        SUBSCRIPTION_CYCLE_SOURCE (str): Where the current cycle end is read from, either the
            latest confirmed payment ("payments") or the subscription's valid_to ("valid_to").
        ADDITIONAL_CORS_ORIGINS (Optional[list[str]]): Additional CORS origins separated by commas.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Tierwise"
    LOCAL_DEVELOPMENT: bool = False
    ENVIRONMENT: str = "local"

    FIRST_SUPERUSER: str

    AUTH_ENABLED: Optional[bool] = False
    AUTH0_DOMAIN: Optional[str] = None
    AUTH0_AUDIENCE: Optional[str] = None

    # Debug configuration
    DEBUG: bool = False

    # Logging configuration
    LOG_LEVEL: str = "INFO"

    POSTGRES_HOST: str = "localhost"
    POSTGRES_DB: str = "tierwise"
    POSTGRES_USER: str = "tierwise"
    POSTGRES_PASSWORD: str = ""
    SQLALCHEMY_ASYNC_DATABASE_URI: Optional[str] = None

    RUN_ALEMBIC_MIGRATIONS: bool = False
    RUN_DB_INIT: bool = True

    # Billing configuration
    BILLING_CYCLE_DAYS: int = 30
    SUBSCRIPTION_CYCLE_SOURCE: Literal["payments", "valid_to"] = "payments"

    ADDITIONAL_CORS_ORIGINS: Optional[str] = None  # Separated by commas or semicolons

    @field_validator("AUTH0_DOMAIN", "AUTH0_AUDIENCE", mode="before")
    def validate_auth0_settings(cls, v: str, info: ValidationInfo) -> str:
        """Validate Auth0 settings when AUTH_ENABLED is True.

        Args:
        ----
            v (str): The value of the Auth0 setting.
            info (ValidationInfo): The validation context containing all field values.

        Returns:
        -------
            str: The validated Auth0 setting.

        Raises:
        ------
            ValueError: If AUTH_ENABLED is True and the Auth0 setting is empty.
        """
        auth_enabled = info.data.get("AUTH_ENABLED", False)
        if auth_enabled and not v:
            field_name = info.field_name
            raise ValueError(f"{field_name} must be set when AUTH_ENABLED is True")
        return v

    @field_validator("BILLING_CYCLE_DAYS")
    def validate_cycle_days(cls, v: int) -> int:
        """A billing cycle has to last at least one day."""
        if v < 1:
            raise ValueError("BILLING_CYCLE_DAYS must be a positive number of days")
        return v

    @field_validator("SQLALCHEMY_ASYNC_DATABASE_URI", mode="before")
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Build the SQLAlchemy database URI.

        Args:
        ----
            v (Optional[str]): The value of the SQLALCHEMY_ASYNC_DATABASE_URI setting.
            info (ValidationInfo): The validation context containing all field values.

        Returns:
        -------
            str: The assembled SQLAlchemy async database URI.

        """
        if isinstance(v, str):
            return v

        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=info.data.get("POSTGRES_USER"),
                password=info.data.get("POSTGRES_PASSWORD") or None,
                host=info.data.get("POSTGRES_HOST", "localhost"),
                path=f"{info.data.get('POSTGRES_DB') or ''}",
            )
        )

    @property
    def cors_origins(self) -> list[str]:
        """Additional CORS origins, split on commas or semicolons."""
        if not self.ADDITIONAL_CORS_ORIGINS:
            return []
        separator = ";" if ";" in self.ADDITIONAL_CORS_ORIGINS else ","
        return [
            origin.strip()
            for origin in self.ADDITIONAL_CORS_ORIGINS.split(separator)
            if origin.strip()
        ]


settings = Settings()
