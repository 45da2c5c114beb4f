"""
Health Program Service - Business logic for the program catalog.
"""
from typing import List
import logging

from sqlalchemy.orm import Session

from ..exceptions import NotFoundException, ValidationException
from .models import HealthProgram, ProgramDifficulty, generate_program_id
from .schemas import ProgramCreate, ProgramResponse, ProgramUpdate

# Set up logging
logger = logging.getLogger(__name__)


def create_program(db: Session, program_data: ProgramCreate) -> HealthProgram:
    """
    Create a new, active program.

    Raises:
        ValidationException: If the name is blank
    """
    if not program_data.name.strip():
        raise ValidationException("Program name is required")

    program = HealthProgram(
        program_id=generate_program_id(),
        is_active=True,
        **program_data.model_dump(),
    )
    db.add(program)
    db.commit()
    db.refresh(program)
    logger.info(f"Program created: {program.program_id} ({program.name})")
    return program


def get_program(db: Session, program_id: str) -> HealthProgram:
    """
    Get a program by its public id.

    Raises:
        NotFoundException: If program not found
    """
    program = db.query(HealthProgram).filter(HealthProgram.program_id == program_id).first()
    if not program:
        raise NotFoundException("Program not found")
    return program


def get_all_programs(db: Session) -> List[HealthProgram]:
    return db.query(HealthProgram).order_by(HealthProgram.id).all()


def get_active_programs(db: Session) -> List[HealthProgram]:
    return (
        db.query(HealthProgram)
        .filter(HealthProgram.is_active.is_(True))
        .order_by(HealthProgram.id)
        .all()
    )


def get_programs_by_difficulty(db: Session, difficulty: ProgramDifficulty) -> List[HealthProgram]:
    return (
        db.query(HealthProgram)
        .filter(HealthProgram.difficulty == difficulty)
        .order_by(HealthProgram.id)
        .all()
    )


def update_program(db: Session, program_id: str, program_data: ProgramUpdate) -> HealthProgram:
    """
    Update the fields present in ``program_data``.

    Raises:
        NotFoundException: If program not found
        ValidationException: If the name would become empty
    """
    program = get_program(db, program_id)

    update_data = program_data.model_dump(exclude_unset=True)
    if "name" in update_data and not (update_data["name"] or "").strip():
        raise ValidationException("Program name is required")
    if "is_active" in update_data and update_data["is_active"] is None:
        del update_data["is_active"]

    for field, value in update_data.items():
        setattr(program, field, value)

    db.commit()
    db.refresh(program)
    logger.info(f"Program {program_id} updated: {sorted(update_data)}")
    return program


def delete_program(db: Session, program_id: str) -> ProgramResponse:
    """
    Delete a program and its enrollments.

    Returns:
        ProgramResponse: Snapshot of the deleted program

    Raises:
        NotFoundException: If program not found
    """
    program = get_program(db, program_id)
    deleted = ProgramResponse.model_validate(program)
    db.delete(program)
    db.commit()
    logger.info(f"Program {program_id} deleted")
    return deleted


def toggle_program_status(db: Session, program_id: str) -> HealthProgram:
    """
    Flip the program's active flag.

    Raises:
        NotFoundException: If program not found
    """
    program = get_program(db, program_id)
    program.is_active = not program.is_active
    db.commit()
    db.refresh(program)
    logger.info(f"Program {program_id} is now {'active' if program.is_active else 'inactive'}")
    return program
