"""
Patient CRUD endpoints — maintained by managers and admins.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_current_user, get_db, require_roles
from hms.core.roles import Role
from hms.models.clinical import Patient
from hms.models.user import User
from hms.schemas.clinical import PatientCreate, PatientRead, PatientUpdate
from hms.schemas.common import ApiResponse, envelope
from hms.services import resources

router = APIRouter(prefix="/patients", tags=["patients"])

_staff = require_roles(Role.MANAGER)


@router.post(
    "", response_model=ApiResponse[PatientRead], status_code=status.HTTP_201_CREATED
)
async def create_patient(
    body: PatientCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    patient = await resources.create(db, Patient(**body.model_dump()))
    return envelope(
        PatientRead.model_validate(patient),
        "Patient created successfully",
        status.HTTP_201_CREATED,
    )


@router.get("", response_model=ApiResponse[list[PatientRead]])
async def list_patients(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    patients = await resources.list_usable(db, Patient)
    return envelope(
        [PatientRead.model_validate(p) for p in patients],
        "Patients fetched successfully",
    )


@router.get("/{patient_id}", response_model=ApiResponse[PatientRead])
async def get_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    patient = await resources.get_or_404(
        db,
        Patient,
        patient_id,
        label="Patient",
        include_unusable=current_user.role == Role.ADMIN,
    )
    return envelope(PatientRead.model_validate(patient), "Patient fetched successfully")


@router.patch("/{patient_id}", response_model=ApiResponse[PatientRead])
async def update_patient(
    patient_id: int,
    body: PatientUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    patient = await resources.get_or_404(db, Patient, patient_id, label="Patient")
    patient = await resources.apply_update(
        db, patient, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return envelope(PatientRead.model_validate(patient), "Patient updated successfully")


@router.delete("/{patient_id}", response_model=ApiResponse)
async def delete_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    patient = await resources.get_or_404(db, Patient, patient_id, label="Patient")
    await resources.soft_delete(db, patient)
    return envelope(None, "Patient deleted successfully")
