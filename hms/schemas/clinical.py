"""Pydantic schemas for Doctor / Patient / Bed."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from hms.schemas.common import CamelModel, require_text


# ── Doctor ──────────────────────────────────────────────────────────
class Availability(CamelModel):
    day: str
    time: str


class DoctorCreate(CamelModel):
    user_id: int | None = None
    salary: float = Field(gt=0)
    qualification: str
    experience_in_years: int = Field(default=0, ge=0)
    works_in_hospitals: list[int] = Field(min_length=1)
    gender: Literal["Male", "Female"]
    availability: list[Availability] = Field(min_length=1)

    check_required = field_validator("qualification")(require_text)


class DoctorUpdate(CamelModel):
    salary: float | None = Field(default=None, gt=0)
    qualification: str | None = None
    experience_in_years: int | None = Field(default=None, ge=0)
    works_in_hospitals: list[int] | None = None
    gender: Literal["Male", "Female"] | None = None
    availability: list[Availability] | None = None


class DoctorRead(CamelModel):
    id: int
    user_id: int | None
    salary: float
    qualification: str
    experience_in_years: int
    works_in_hospitals: list[int]
    gender: str
    availability: list[Availability]
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ── Patient ─────────────────────────────────────────────────────────
class PatientCreate(CamelModel):
    user_id: int | None = None
    age: int
    blood_group: str
    medical_history: str
    allergies: list[str]
    hospital_id: int | None = None
    emergency_contact: str
    current_condition: str
    gender: Literal["M", "F", "O"]
    assigned_doctor_id: int | None = None

    check_required = field_validator(
        "blood_group", "medical_history", "emergency_contact", "current_condition"
    )(require_text)

    @field_validator("age")
    @classmethod
    def _positive_age(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Age must be a positive number.")
        return v


class PatientUpdate(CamelModel):
    age: int | None = None
    blood_group: str | None = None
    medical_history: str | None = None
    allergies: list[str] | None = None
    hospital_id: int | None = None
    emergency_contact: str | None = None
    current_condition: str | None = None
    gender: Literal["M", "F", "O"] | None = None
    assigned_doctor_id: int | None = None

    @field_validator("age")
    @classmethod
    def _positive_age(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("Age must be a positive number.")
        return v


class PatientRead(CamelModel):
    id: int
    user_id: int | None
    age: int
    blood_group: str
    medical_history: str
    allergies: list[str]
    hospital_id: int | None
    emergency_contact: str
    current_condition: str
    gender: str
    assigned_doctor_id: int | None = None
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ── Bed ─────────────────────────────────────────────────────────────
class BedCreate(CamelModel):
    bed_number: str
    room: str
    is_occupied: bool = False
    patient_id: int | None = None
    hospital_id: int | None = None

    check_required = field_validator("bed_number", "room")(require_text)


class BedUpdate(CamelModel):
    bed_number: str | None = None
    room: str | None = None
    is_occupied: bool | None = None
    patient_id: int | None = None
    hospital_id: int | None = None


class BedRead(CamelModel):
    id: int
    bed_number: str
    room: str
    is_occupied: bool
    patient_id: int | None
    hospital_id: int | None
    is_active: bool
    is_deleted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
