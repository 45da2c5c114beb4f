"""
Enrollment Service - Enrolling accounts in programs and tracking their progress.

An account can be enrolled in a program at most once. The pre-insert check
gives a clear error; the composite primary key catches concurrent duplicates
that pass the check at the same time.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.service import get_user
from ..exceptions import ConflictException, NotFoundException, ValidationException
from ..programs.service import get_program
from .models import Enrollment, EnrollmentStatus
from .schemas import EnrollmentUpdate

# Set up logging
logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "User is already enrolled in this program"


def get_enrollment(db: Session, user_id: str, program_id: str) -> Optional[Enrollment]:
    return db.get(Enrollment, (user_id, program_id))


def check_enrollment_exists(db: Session, user_id: str, program_id: str) -> bool:
    return get_enrollment(db, user_id, program_id) is not None


def get_enrollment_or_404(db: Session, user_id: str, program_id: str) -> Enrollment:
    """
    Raises:
        NotFoundException: If the account is not enrolled in the program
    """
    enrollment = get_enrollment(db, user_id, program_id)
    if not enrollment:
        raise NotFoundException("Enrollment not found")
    return enrollment


def create_enrollment(
    db: Session,
    user_id: str,
    program_id: str,
    notes: Optional[str] = None,
) -> Enrollment:
    """
    Enroll an account in a program with status ``active`` and no progress.

    Raises:
        NotFoundException: If the account or the program does not exist
        ValidationException: If the program is inactive
        ConflictException: If the account is already enrolled in the program
    """
    get_user(db, user_id)
    program = get_program(db, program_id)
    if not program.is_active:
        raise ValidationException("Program is not active")

    if check_enrollment_exists(db, user_id, program_id):
        logger.warning(f"Enrollment rejected: {user_id} already in {program_id}")
        raise ConflictException(ALREADY_ENROLLED)

    enrollment = Enrollment(
        user_id=user_id,
        program_id=program_id,
        status=EnrollmentStatus.ACTIVE,
        progress=0,
        notes=notes,
    )
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent enrollment of {user_id} in {program_id} rejected by the database")
        raise ConflictException(ALREADY_ENROLLED)

    db.refresh(enrollment)
    logger.info(f"User {user_id} enrolled in {program_id}")
    return enrollment


def get_all_enrollments(db: Session) -> List[Enrollment]:
    return db.query(Enrollment).order_by(Enrollment.enrolled_at, Enrollment.user_id).all()


def get_enrollments_by_user(db: Session, user_id: str) -> List[Enrollment]:
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.enrolled_at, Enrollment.program_id)
        .all()
    )


def get_enrollments_by_program(db: Session, program_id: str) -> List[Enrollment]:
    """
    Raises:
        NotFoundException: If the program does not exist
    """
    get_program(db, program_id)
    return (
        db.query(Enrollment)
        .filter(Enrollment.program_id == program_id)
        .order_by(Enrollment.enrolled_at, Enrollment.user_id)
        .all()
    )


def update_enrollment(
    db: Session,
    user_id: str,
    program_id: str,
    update_data: EnrollmentUpdate,
) -> Enrollment:
    """
    Update status, progress or notes. Setting the status to ``completed``
    completes the enrollment; moving it to another status clears ``completed_at``.

    Raises:
        NotFoundException: If the enrollment does not exist
    """
    enrollment = get_enrollment_or_404(db, user_id, program_id)
    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)

    if changes.get("status") == EnrollmentStatus.COMPLETED:
        enrollment.mark_completed()
        changes.pop("status")
        changes.pop("progress", None)
    elif "status" in changes and enrollment.is_completed:
        # Reopened: it is no longer completed
        enrollment.completed_at = None
    for field, value in changes.items():
        setattr(enrollment, field, value)
    enrollment.touch()

    db.commit()
    db.refresh(enrollment)
    logger.info(f"Enrollment {user_id}/{program_id} updated: {sorted(changes)}")
    return enrollment


def complete_enrollment(db: Session, user_id: str, program_id: str) -> Enrollment:
    """
    Mark an enrollment completed with full progress.

    Raises:
        NotFoundException: If the enrollment does not exist
    """
    enrollment = get_enrollment_or_404(db, user_id, program_id)
    enrollment.mark_completed()
    db.commit()
    db.refresh(enrollment)
    logger.info(f"Enrollment {user_id}/{program_id} completed")
    return enrollment


def delete_enrollment(db: Session, user_id: str, program_id: str) -> None:
    """
    Raises:
        NotFoundException: If the enrollment does not exist
    """
    enrollment = get_enrollment_or_404(db, user_id, program_id)
    db.delete(enrollment)
    db.commit()
    logger.info(f"Enrollment {user_id}/{program_id} deleted")
