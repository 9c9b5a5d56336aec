"""Pydantic schemas for JWT tokens and the auth request bodies."""

from __future__ import annotations

from typing import Any

from hms.schemas.common import CamelModel
from hms.schemas.user import UserRead


class Token(CamelModel):
    access_token: str
    refresh_token: str


class LoginResult(Token):
    user: UserRead


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class RegisterRequest(CamelModel):
    email: str | None = None
    full_name: str | None = None
    password: str | None = None
    mobile_number: str | None = None
    role: Any = None  # canonical name or legacy number / label
    is_active: bool = True
    is_deleted: bool = False


class ChangePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None
