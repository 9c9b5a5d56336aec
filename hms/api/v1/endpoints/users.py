"""
User administration — list, fetch, update and soft-delete accounts.

New accounts are created through ``/auths/register``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_db, require_roles
from hms.core.exceptions import ConflictError, ForbiddenError
from hms.core.roles import Role
from hms.models.user import User
from hms.schemas.common import ApiResponse, envelope
from hms.schemas.user import UserRead, UserUpdate
from hms.services import resources

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

_staff = require_roles(Role.MANAGER)


@router.get("", response_model=ApiResponse[list[UserRead]])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    users = await resources.list_usable(db, User)
    return envelope(
        [UserRead.model_validate(u) for u in users], "Users fetched successfully"
    )


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_staff),
) -> ApiResponse:
    user = await resources.get_or_404(
        db, User, user_id, label="User", include_unusable=True
    )
    if not user.is_usable and current_user.role != Role.ADMIN:
        raise ForbiddenError("Access denied: User is inactive or deleted")
    return envelope(UserRead.model_validate(user), "User fetched successfully")


@router.patch("/{user_id}", response_model=ApiResponse[UserRead])
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    user = await resources.get_or_404(
        db, User, user_id, label="User", include_unusable=True
    )
    changes = body.model_dump(exclude_unset=True, exclude_none=True)

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        taken = await db.execute(select(User.id).where(User.email == new_email))
        if taken.scalar_one_or_none() is not None:
            raise ConflictError("User with email already exists")

    user = await resources.apply_update(db, user, changes)
    return envelope(UserRead.model_validate(user), "User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_staff),
) -> ApiResponse:
    user = await resources.get_or_404(
        db, User, user_id, label="User", include_unusable=True
    )
    await resources.soft_delete(db, user)
    return envelope(None, "User deleted successfully")
