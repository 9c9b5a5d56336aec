"""
Declarative base and the column mixins shared by every table.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, and_, false, true
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    # Models annotate plain Column attributes
    __allow_unmapped__ = True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    # Columns declared on a mixin must use Mapped[] annotations
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )


class LifecycleMixin:
    """Soft-delete flags plus the single "is usable" predicate.

    ``Model.is_usable`` works both on instances and inside ``select()``.
    """

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    @hybrid_property
    def is_usable(self) -> bool:
        return bool(self.is_active) and not self.is_deleted

    @is_usable.inplace.expression
    @classmethod
    def _is_usable_expression(cls):
        return and_(cls.is_active.is_(True), cls.is_deleted.is_(False))
