"""User model."""

from __future__ import annotations

from pydantic import Field

from urbanmon.models._base import Timestamp, UrbanBaseModel


class UserCreate(UrbanBaseModel):
    username: str = Field(min_length=1)
    password: str = Field(repr=False)
    role: str = "citizen"


class User(UrbanBaseModel):
    """A dashboard user. ``password`` is opaque and excluded from ``repr``."""

    id: int
    username: str
    password: str = Field(repr=False)
    role: str = "citizen"
    created_at: Timestamp
