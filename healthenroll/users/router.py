"""
User Router - Profile management and account administration endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import (
    ensure_self_or_roles,
    get_current_active_user,
    require_admin,
)
from ..auth.models import User, UserRole
from ..auth.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
    UpgradeDoctorRequest,
    UserResponse,
    UserStatusUpdate,
)
from ..auth.service import change_password, upgrade_to_doctor
from ..database import get_db
from .service import (
    delete_user,
    get_user_profile,
    list_users,
    search_users,
    set_user_active,
    update_user_profile,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
async def list_users_route(
    limit: int = Query(10, ge=1, le=100, description="Maximum number of users"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    List accounts with their profiles (admin only).
    """
    return list_users(db, limit)


@router.get("/search", response_model=List[UserResponse])
async def search_users_route(
    query: str = Query("", description="Substring of email or user id"),
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Search accounts by email or user id, optionally filtered by role (admin only).
    """
    return search_users(db, query, role)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_route(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    ensure_self_or_roles(current_user, user_id, [UserRole.ADMIN])
    return get_user_profile(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user_route(
    user_id: str,
    profile_data: UpdateProfileRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Update account and role-profile fields of the caller, or of any user for admins.
    """
    ensure_self_or_roles(current_user, user_id, [UserRole.ADMIN])
    return update_user_profile(db, user_id, profile_data)


@router.post("/{user_id}/change-password", response_model=MessageResponse)
async def change_password_route(
    user_id: str,
    password_data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Change a password; the current password must be supplied.
    """
    ensure_self_or_roles(current_user, user_id, [UserRole.ADMIN])
    return await change_password(db, user_id, password_data.current_password, password_data.new_password)


@router.post("/{user_id}/upgrade-doctor", response_model=MessageResponse)
async def upgrade_doctor_route(
    user_id: str,
    upgrade_data: UpgradeDoctorRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Promote a client to the doctor role (admin only).
    """
    return await upgrade_to_doctor(db, user_id, upgrade_data.license_number, upgrade_data.specialization)


@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status_route(
    user_id: str,
    status_data: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Activate or deactivate an account (admin only).
    """
    return set_user_active(db, user_id, status_data.is_active)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_route(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Delete an account together with its profiles and enrollments (admin only).
    """
    delete_user(db, user_id)
