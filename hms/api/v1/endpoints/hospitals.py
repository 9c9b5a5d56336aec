"""
Hospital CRUD endpoints.

- GET operations require any authenticated user.
- POST / PATCH / DELETE operations require admin role.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_current_user, get_db, require_roles
from hms.core.roles import Role
from hms.models.hospital import Hospital
from hms.models.user import User
from hms.schemas.common import ApiResponse, envelope, merge_address
from hms.schemas.hospital import HospitalCreate, HospitalRead, HospitalUpdate
from hms.services import resources

router = APIRouter(prefix="/hospitals", tags=["hospitals"])

_admin = require_roles(Role.ADMIN)


@router.post(
    "", response_model=ApiResponse[HospitalRead], status_code=status.HTTP_201_CREATED
)
async def create_hospital(
    body: HospitalCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> ApiResponse:
    hospital = await resources.create(db, Hospital(**body.model_dump()))
    return envelope(
        HospitalRead.model_validate(hospital),
        "Hospital created successfully",
        status.HTTP_201_CREATED,
    )


@router.get("", response_model=ApiResponse[list[HospitalRead]])
async def list_hospitals(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ApiResponse:
    hospitals = await resources.list_usable(db, Hospital)
    return envelope(
        [HospitalRead.model_validate(h) for h in hospitals],
        "Hospitals fetched successfully",
    )


@router.get("/{hospital_id}", response_model=ApiResponse[HospitalRead])
async def get_hospital(
    hospital_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    hospital = await resources.get_or_404(
        db,
        Hospital,
        hospital_id,
        label="Hospital",
        include_unusable=current_user.role == Role.ADMIN,
    )
    return envelope(HospitalRead.model_validate(hospital), "Hospital fetched successfully")


@router.patch("/{hospital_id}", response_model=ApiResponse[HospitalRead])
async def update_hospital(
    hospital_id: int,
    body: HospitalUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> ApiResponse:
    hospital = await resources.get_or_404(db, Hospital, hospital_id, label="Hospital")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if body.address is not None:
        changes["address"] = merge_address(hospital.address, body.address)
    hospital = await resources.apply_update(db, hospital, changes)
    return envelope(HospitalRead.model_validate(hospital), "Hospital updated successfully")


@router.delete("/{hospital_id}", response_model=ApiResponse)
async def delete_hospital(
    hospital_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> ApiResponse:
    hospital = await resources.get_or_404(db, Hospital, hospital_id, label="Hospital")
    await resources.soft_delete(db, hospital)
    return envelope(None, "Hospital deleted successfully")
