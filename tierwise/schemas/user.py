"""User schema module."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Base schema for User."""

    email: EmailStr
    full_name: Optional[str] = "Superuser"

    class Config:
        """Pydantic config for UserBase."""

        from_attributes = True


class UserCreate(UserBase):
    """Schema for creating a User object."""

    is_superuser: bool = False


class UserInDBBase(UserBase):
    """Base schema for User stored in DB."""

    id: UUID
    is_active: bool = True
    is_superuser: bool = False
    team_ids: list[UUID] = Field(default_factory=list)

    @field_validator("team_ids", mode="before")
    @classmethod
    def load_team_ids(cls, v):
        """Ensure team ids are always a list."""
        return v or []


class User(UserInDBBase):
    """Schema for User."""

    class Config:
        """Pydantic config for User."""

        from_attributes = True
        populate_by_name = True
