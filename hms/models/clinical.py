"""
Doctor, patient & bed models.

Cross references (hospital, doctor, patient ids) are stored as plain
foreign keys; no cascading or consistency rules are applied between them.
"""

from __future__ import annotations

from sqlalchemy import (JSON, Boolean, Column, Float, ForeignKey, Integer,
                        String)

from hms.db.base import Base, LifecycleMixin, TimestampMixin


class Doctor(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "doctors"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    salary: float = Column(Float, nullable=False)  # type: ignore[assignment]
    qualification: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    experience_in_years: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    works_in_hospitals: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    gender: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # Male | Female
    availability: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]  # [{day, time}]


class Patient(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "patients"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    age: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    blood_group: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    medical_history: str = Column(String(2000), nullable=False)  # type: ignore[assignment]
    allergies: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    hospital_id: int | None = Column(Integer, ForeignKey("hospitals.id"), nullable=True)  # type: ignore[assignment]
    emergency_contact: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    current_condition: str = Column(String(500), nullable=False)  # type: ignore[assignment]
    gender: str = Column(String(1), nullable=False)  # type: ignore[assignment]  # M | F | O
    assigned_doctor_id: int | None = Column(Integer, ForeignKey("doctors.id"), nullable=True)  # type: ignore[assignment]


class Bed(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "beds"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    bed_number: str = Column(String(50), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    room: str = Column(String(50), nullable=False)  # type: ignore[assignment]
    is_occupied: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    patient_id: int | None = Column(Integer, ForeignKey("patients.id"), nullable=True)  # type: ignore[assignment]
    hospital_id: int | None = Column(Integer, ForeignKey("hospitals.id"), nullable=True)  # type: ignore[assignment]
