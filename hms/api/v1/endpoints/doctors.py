"""
Doctor CRUD endpoints.

Hospital accounts (and admins) manage doctors.  Patients may not list
doctors.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_current_user, get_db, require_roles
from hms.core.roles import Role
from hms.models.clinical import Doctor
from hms.models.user import User
from hms.schemas.clinical import DoctorCreate, DoctorRead, DoctorUpdate
from hms.schemas.common import ApiResponse, envelope
from hms.services import resources

router = APIRouter(prefix="/doctors", tags=["doctors"])

_hospital = require_roles(Role.HOSPITAL)
_non_patient = require_roles(Role.MANAGER, Role.HOSPITAL, Role.DOCTOR)


@router.post(
    "", response_model=ApiResponse[DoctorRead], status_code=status.HTTP_201_CREATED
)
async def create_doctor(
    body: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    doctor = await resources.create(db, Doctor(**body.model_dump()))
    return envelope(
        DoctorRead.model_validate(doctor),
        "Doctor created successfully",
        status.HTTP_201_CREATED,
    )


@router.get("", response_model=ApiResponse[list[DoctorRead]])
async def list_doctors(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_non_patient),
) -> ApiResponse:
    doctors = await resources.list_usable(db, Doctor)
    return envelope(
        [DoctorRead.model_validate(d) for d in doctors], "Doctors fetched successfully"
    )


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorRead])
async def get_doctor(
    doctor_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    doctor = await resources.get_or_404(
        db,
        Doctor,
        doctor_id,
        label="Doctor",
        include_unusable=current_user.role == Role.ADMIN,
    )
    return envelope(DoctorRead.model_validate(doctor), "Doctor fetched successfully")


@router.patch("/{doctor_id}", response_model=ApiResponse[DoctorRead])
async def update_doctor(
    doctor_id: int,
    body: DoctorUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    doctor = await resources.get_or_404(db, Doctor, doctor_id, label="Doctor")
    doctor = await resources.apply_update(
        db, doctor, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return envelope(DoctorRead.model_validate(doctor), "Doctor updated successfully")


@router.delete("/{doctor_id}", response_model=ApiResponse)
async def delete_doctor(
    doctor_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_hospital),
) -> ApiResponse:
    doctor = await resources.get_or_404(db, Doctor, doctor_id, label="Doctor")
    await resources.soft_delete(db, doctor)
    return envelope(None, "Doctor deleted successfully")
