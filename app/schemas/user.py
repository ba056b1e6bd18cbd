"""Pydantic schemas for users."""

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Data needed to register a user."""

    username: str = Field(..., min_length=1, description="Unique login name")
    password: str = Field(..., min_length=1, description="Opaque credential")


class User(BaseModel):
    """Schema for a stored user."""

    id: int
    username: str
    password: str

    model_config = ConfigDict(from_attributes=True)
