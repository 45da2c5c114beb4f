"""
Enrollment Router - Enrollment administration for doctors and admins.

Clients enroll themselves through ``/program/{program_id}/enroll``.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import ensure_self_or_roles, get_current_active_user, require_doctor_or_admin
from ..auth.models import User, UserRole
from ..database import get_db
from .schemas import EnrollmentCreate, EnrollmentResponse, EnrollmentUpdate
from .service import (
    create_enrollment,
    delete_enrollment,
    get_all_enrollments,
    get_enrollments_by_program,
    get_enrollments_by_user,
    update_enrollment,
)

router = APIRouter(prefix="/enrollments", tags=["Enrollments"])


@router.get("", response_model=List[EnrollmentResponse])
async def list_enrollments_route(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    return get_all_enrollments(db)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def create_enrollment_route(
    enrollment_data: EnrollmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Enroll a given user in a program.
    """
    return create_enrollment(db, enrollment_data.user_id, enrollment_data.program_id, enrollment_data.notes)


@router.get("/user/{user_id}", response_model=List[EnrollmentResponse])
async def list_user_enrollments_route(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    List one user's enrollments. Users may list their own.
    """
    ensure_self_or_roles(current_user, user_id, [UserRole.DOCTOR, UserRole.ADMIN])
    return get_enrollments_by_user(db, user_id)


@router.get("/program/{program_id}", response_model=List[EnrollmentResponse])
async def list_program_enrollments_route(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    return get_enrollments_by_program(db, program_id)


@router.patch("/{user_id}/{program_id}", response_model=EnrollmentResponse)
async def update_enrollment_route(
    user_id: str,
    program_id: str,
    update_data: EnrollmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Update an enrollment's status, progress or notes.
    """
    return update_enrollment(db, user_id, program_id, update_data)


@router.delete("/{user_id}/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enrollment_route(
    user_id: str,
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    delete_enrollment(db, user_id, program_id)
