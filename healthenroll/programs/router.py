"""
Health Program Router - Program catalog endpoints and self-service enrollment.

Static paths (``/active``, ``/enrollments``, ``/difficulty/...``) are declared
before ``/{program_id}`` so they are not captured as program ids.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_active_user, require_doctor_or_admin
from ..auth.models import User
from ..database import get_db
from ..enrollments.schemas import EnrollmentResponse, SelfEnrollmentRequest
from ..enrollments.service import (
    complete_enrollment,
    create_enrollment,
    get_enrollments_by_user,
)
from .models import ProgramDifficulty
from .schemas import ProgramCreate, ProgramResponse, ProgramUpdate
from .service import (
    create_program,
    delete_program,
    get_active_programs,
    get_all_programs,
    get_program,
    get_programs_by_difficulty,
    toggle_program_status,
    update_program,
)

router = APIRouter(prefix="/program", tags=["Health Programs"])


@router.post("", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
async def create_program_route(
    program_data: ProgramCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Create a health program (doctors and admins).
    """
    return create_program(db, program_data)


@router.get("", response_model=List[ProgramResponse])
async def list_programs_route(db: Session = Depends(get_db)):
    return get_all_programs(db)


@router.get("/active", response_model=List[ProgramResponse])
async def list_active_programs_route(db: Session = Depends(get_db)):
    return get_active_programs(db)


@router.get("/difficulty/{difficulty}", response_model=List[ProgramResponse])
async def list_programs_by_difficulty_route(
    difficulty: ProgramDifficulty,
    db: Session = Depends(get_db),
):
    return get_programs_by_difficulty(db, difficulty)


@router.get("/enrollments", response_model=List[EnrollmentResponse])
async def my_enrollments_route(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    List the caller's enrollments with program details.
    """
    return get_enrollments_by_user(db, current_user.user_id)


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program_route(program_id: str, db: Session = Depends(get_db)):
    return get_program(db, program_id)


@router.put("/{program_id}", response_model=ProgramResponse)
async def update_program_route(
    program_id: str,
    program_data: ProgramUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Update a program's fields (doctors and admins).
    """
    return update_program(db, program_id, program_data)


@router.delete("/{program_id}", response_model=ProgramResponse)
async def delete_program_route(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Delete a program and all of its enrollments (doctors and admins).
    """
    return delete_program(db, program_id)


@router.patch("/{program_id}/toggle", response_model=ProgramResponse)
async def toggle_program_route(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_admin),
):
    """
    Switch a program between active and inactive (doctors and admins).
    """
    return toggle_program_status(db, program_id)


@router.post("/{program_id}/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll_route(
    program_id: str,
    enrollment_data: Optional[SelfEnrollmentRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Enroll the caller in a program. The request body is optional.
    """
    notes = enrollment_data.notes if enrollment_data else None
    return create_enrollment(db, current_user.user_id, program_id, notes)


@router.post("/{program_id}/complete", response_model=EnrollmentResponse)
async def complete_route(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Mark the caller's enrollment in a program as completed.
    """
    return complete_enrollment(db, current_user.user_id, program_id)
