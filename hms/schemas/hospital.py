"""Pydantic schemas for Hospital & Facility."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum

from pydantic import Field, field_validator

from hms.schemas.common import Address, AddressUpdate, CamelModel, require_text


class FacilityType(IntEnum):
    HOSPITAL = 0
    CLINIC = 1
    HEALTH_CENTER = 2


# ── Hospital ────────────────────────────────────────────────────────
class HospitalCreate(CamelModel):
    name: str
    address: Address
    specialized_in: list[str] = Field(min_length=1)
    contact_number: str

    check_required = field_validator("name", "contact_number")(require_text)


class HospitalUpdate(CamelModel):
    name: str | None = None
    address: AddressUpdate | None = None
    specialized_in: list[str] | None = None
    contact_number: str | None = None


class HospitalRead(CamelModel):
    id: int
    name: str
    address: Address
    specialized_in: list[str]
    contact_number: str
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ── Facility ────────────────────────────────────────────────────────
class FacilityCreate(CamelModel):
    name: str
    address: Address
    type: FacilityType

    check_required = field_validator("name")(require_text)


class FacilityUpdate(CamelModel):
    name: str | None = None
    address: AddressUpdate | None = None
    type: FacilityType | None = None


class FacilityRead(CamelModel):
    id: int
    name: str
    address: Address
    type: FacilityType
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
