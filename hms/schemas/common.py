"""Shared pydantic building blocks: camelCase models and the envelope."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ApiResponse(CamelModel, Generic[T]):
    """Uniform result envelope returned by every endpoint."""

    status_code: int = 200
    success: bool = True
    message: str = ""
    data: T | None = None


def envelope(data: Any = None, message: str = "", status_code: int = 200) -> ApiResponse:
    return ApiResponse(status_code=status_code, success=status_code < 400, message=message, data=data)


# ── Address ─────────────────────────────────────────────────────────
class Address(CamelModel):
    state: str
    city: str
    pincode: str

    @field_validator("state", "city", "pincode")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class AddressUpdate(CamelModel):
    state: str | None = None
    city: str | None = None
    pincode: str | None = None


def merge_address(current: dict | None, update: AddressUpdate) -> dict:
    """Overlay the non-empty parts of *update* onto the stored address."""
    merged = dict(current or {})
    for key, value in update.model_dump(exclude_none=True).items():
        if value:
            merged[key] = value
    return merged


def require_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v
