"""
Pydantic models for user data.

Defines schemas for registering, logging in and reading users.
Password hashes are never returned through the API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    email: str = Field(..., example="user@example.com")


class UserCreate(UserBase):
    """Schema for registering a user.

    Both fields are checked by ``UserService``; an empty ``email`` or
    ``password`` results in a 422 response with field errors.
    """

    password: str = Field(..., example="strongpassword")


class UserLogin(UserCreate):
    """Credentials submitted to ``POST /users/login``."""


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
