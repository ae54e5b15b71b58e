"""Shared response schemas."""

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Acknowledgment of a completed mutation."""

    success: bool = Field(default=True, description="Whether the operation succeeded")
