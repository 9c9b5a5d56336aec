"""
User model — credentials, session state & role-based access control.
"""

from __future__ import annotations

from sqlalchemy import Column, Enum, Integer, String

from hms.core.roles import Role
from hms.db.base import Base, LifecycleMixin, TimestampMixin


class User(LifecycleMixin, TimestampMixin, Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    full_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    mobile_number: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    # Latest issued refresh token; NULL once logged out
    refresh_token: str | None = Column(String(1024), nullable=True)  # type: ignore[assignment]
    role: Role = Column(  # type: ignore[assignment]
        Enum(
            Role,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.PATIENT,
    )
