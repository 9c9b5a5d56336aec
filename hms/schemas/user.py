"""Pydantic schemas for User reads and admin updates."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import field_validator

from hms.core.roles import Role
from hms.schemas.common import CamelModel


class UserRead(CamelModel):
    """Public view of a user; password hash and refresh token never appear."""

    id: int
    email: str
    full_name: str
    mobile_number: str
    role: Role
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserUpdate(CamelModel):
    full_name: str | None = None
    email: str | None = None
    mobile_number: str | None = None
    role: Role | None = None
    is_active: bool | None = None
    is_deleted: bool | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v: Any) -> Role | None:
        return None if v is None else Role.parse(v)

    @field_validator("email", "full_name", "mobile_number")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v
