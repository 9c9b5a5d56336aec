"""
Lookup / update / soft-delete helpers shared by every resource router.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.core.exceptions import NotFoundError
from hms.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def list_usable(db: AsyncSession, model: type[ModelT]) -> list[ModelT]:
    result = await db.execute(
        select(model).where(model.is_usable).order_by(model.id)  # type: ignore[attr-defined]
    )
    return list(result.scalars().all())


async def get_or_404(
    db: AsyncSession,
    model: type[ModelT],
    record_id: int,
    *,
    label: str,
    include_unusable: bool = False,
) -> ModelT:
    """Fetch a row by id; inactive / soft-deleted rows count as missing
    unless *include_unusable* is set."""
    record = await db.get(model, record_id)
    if record is None or not (include_unusable or record.is_usable):  # type: ignore[attr-defined]
        raise NotFoundError(f"{label} not found")
    return record


async def create(db: AsyncSession, record: ModelT) -> ModelT:
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info("Created %s %d", type(record).__name__, record.id)  # type: ignore[attr-defined]
    return record


async def apply_update(db: AsyncSession, record: ModelT, changes: dict[str, Any]) -> ModelT:
    for field, value in changes.items():
        setattr(record, field, value)
    await db.commit()
    await db.refresh(record)
    logger.info(
        "Updated %s %d: %s", type(record).__name__, record.id, sorted(changes)  # type: ignore[attr-defined]
    )
    return record


async def soft_delete(db: AsyncSession, record: ModelT) -> None:
    record.is_deleted = True  # type: ignore[attr-defined]
    await db.commit()
    logger.info("Soft-deleted %s %d", type(record).__name__, record.id)  # type: ignore[attr-defined]
