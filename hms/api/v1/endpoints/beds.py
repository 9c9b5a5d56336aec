"""
Bed CRUD endpoints.  Bed numbers are unique across the system.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_current_user, get_db, require_roles
from hms.core.exceptions import ConflictError
from hms.core.roles import Role
from hms.models.clinical import Bed
from hms.models.user import User
from hms.schemas.clinical import BedCreate, BedRead, BedUpdate
from hms.schemas.common import ApiResponse, envelope
from hms.services import resources

router = APIRouter(prefix="/beds", tags=["beds"])

_hospital = require_roles(Role.HOSPITAL)


async def _ensure_bed_number_free(db: AsyncSession, bed_number: str) -> None:
    existing = await db.execute(select(Bed.id).where(Bed.bed_number == bed_number))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"Bed number '{bed_number}' already exists")


@router.post("", response_model=ApiResponse[BedRead], status_code=status.HTTP_201_CREATED)
async def create_bed(
    body: BedCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    await _ensure_bed_number_free(db, body.bed_number)
    bed = await resources.create(db, Bed(**body.model_dump()))
    return envelope(
        BedRead.model_validate(bed), "Bed created successfully", status.HTTP_201_CREATED
    )


@router.get("", response_model=ApiResponse[list[BedRead]])
async def list_beds(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ApiResponse:
    beds = await resources.list_usable(db, Bed)
    return envelope([BedRead.model_validate(b) for b in beds], "Beds fetched successfully")


@router.get("/{bed_id}", response_model=ApiResponse[BedRead])
async def get_bed(
    bed_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    bed = await resources.get_or_404(
        db, Bed, bed_id, label="Bed", include_unusable=current_user.role == Role.ADMIN
    )
    return envelope(BedRead.model_validate(bed), "Bed fetched successfully")


@router.patch("/{bed_id}", response_model=ApiResponse[BedRead])
async def update_bed(
    bed_id: int,
    body: BedUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    bed = await resources.get_or_404(db, Bed, bed_id, label="Bed")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "bed_number" in changes and changes["bed_number"] != bed.bed_number:
        await _ensure_bed_number_free(db, changes["bed_number"])
    bed = await resources.apply_update(db, bed, changes)
    return envelope(BedRead.model_validate(bed), "Bed updated successfully")


@router.delete("/{bed_id}", response_model=ApiResponse)
async def delete_bed(
    bed_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    bed = await resources.get_or_404(db, Bed, bed_id, label="Bed")
    await resources.soft_delete(db, bed)
    return envelope(None, "Bed deleted successfully")
