"""
Hospital & facility models.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, Integer, String

from hms.db.base import Base, LifecycleMixin, TimestampMixin


class Hospital(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "hospitals"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    address: dict = Column(JSON, nullable=False)  # type: ignore[assignment]  # {state, city, pincode}
    specialized_in: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    contact_number: str = Column(String(30), nullable=False)  # type: ignore[assignment]


class Facility(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "facilities"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    address: dict = Column(JSON, nullable=False)  # type: ignore[assignment]
    type: int = Column(Integer, nullable=False)  # type: ignore[assignment]  # 0 hospital | 1 clinic | 2 health center
