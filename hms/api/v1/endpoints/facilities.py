"""
Facility CRUD endpoints (hospitals, clinics, health centers).

Managers and admins maintain facilities; any authenticated user may
fetch a single facility.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_current_user, get_db, require_roles
from hms.core.roles import Role
from hms.models.hospital import Facility
from hms.models.user import User
from hms.schemas.common import ApiResponse, envelope, merge_address
from hms.schemas.hospital import FacilityCreate, FacilityRead, FacilityUpdate
from hms.services import resources

router = APIRouter(prefix="/facilities", tags=["facilities"])

_staff = require_roles(Role.MANAGER)


@router.post(
    "", response_model=ApiResponse[FacilityRead], status_code=status.HTTP_201_CREATED
)
async def create_facility(
    body: FacilityCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    facility = await resources.create(db, Facility(**body.model_dump()))
    return envelope(
        FacilityRead.model_validate(facility),
        "Facility created successfully",
        status.HTTP_201_CREATED,
    )


@router.get("", response_model=ApiResponse[list[FacilityRead]])
async def list_facilities(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    facilities = await resources.list_usable(db, Facility)
    return envelope(
        [FacilityRead.model_validate(f) for f in facilities],
        "Facilities fetched successfully",
    )


@router.get("/{facility_id}", response_model=ApiResponse[FacilityRead])
async def get_facility(
    facility_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    facility = await resources.get_or_404(
        db,
        Facility,
        facility_id,
        label="Facility",
        include_unusable=current_user.role == Role.ADMIN,
    )
    return envelope(FacilityRead.model_validate(facility), "Facility fetched successfully")


@router.patch("/{facility_id}", response_model=ApiResponse[FacilityRead])
async def update_facility(
    facility_id: int,
    body: FacilityUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    facility = await resources.get_or_404(db, Facility, facility_id, label="Facility")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if body.address is not None:
        changes["address"] = merge_address(facility.address, body.address)
    facility = await resources.apply_update(db, facility, changes)
    return envelope(FacilityRead.model_validate(facility), "Facility updated successfully")


@router.delete("/{facility_id}", response_model=ApiResponse)
async def delete_facility(
    facility_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    facility = await resources.get_or_404(db, Facility, facility_id, label="Facility")
    await resources.soft_delete(db, facility)
    return envelope(None, "Facility deleted successfully")
