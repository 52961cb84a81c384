"""
Pydantic models for tasks.

``TaskCreate`` and ``TaskUpdate`` describe request bodies, ``TaskRead``
is returned by every task endpoint.  Only ``title`` and ``completed``
are writable by clients; the owner is always taken from the
authenticated user.  Non-blank titles are enforced by ``TaskService``
so that the same rule applies to callers that bypass HTTP.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictBool


class TaskBase(BaseModel):
    title: str = Field("", example="Buy milk")
    completed: StrictBool = Field(False, example=False)


class TaskCreate(TaskBase):
    """Schema for creating a task."""


class TaskUpdate(BaseModel):
    """Schema for updating a task.

    Fields left out of the request body are not changed.  Sending
    ``"completed": null`` explicitly is rejected by the service.
    """

    title: Optional[str] = Field(None, example="Buy oat milk")
    completed: Optional[StrictBool] = Field(None, example=True)


class TaskRead(TaskBase):
    """Schema for reading a task from the API."""

    id: Optional[int] = None
    user_id: int
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
