from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from typing import List
from uuid import UUID

from loguru import logger

from app.core.exceptions import ValidationError
from app.models.academic import AcademicRecord
from app.models.student import Student
from app.models.user import User, UserRole
from app.schemas.student import AcademicRecordCreate, StudentCreate


async def create_student_profile(
    session: AsyncSession,
    data: StudentCreate,
    user: User | None = None,
) -> Student:
    """
    Creates the student profile and links it to the calling account
    (accounts themselves are provisioned by the auth service).
    """
    student = Student(**data.model_dump())
    session.add(student)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ValidationError("A student with this UCE number or email already exists")

    if user is not None and user.role == UserRole.Student:
        user.student_id = student.id
        session.add(user)

    await session.commit()
    await session.refresh(student)
    logger.info(f"Student profile created for {student.uce}")
    return student


async def add_academic_record(
    session: AsyncSession,
    student_id: UUID,
    data: AcademicRecordCreate,
) -> AcademicRecord:
    record = AcademicRecord(student_id=student_id, **data.model_dump())
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


async def list_academic_records(session: AsyncSession, student_id: UUID) -> List[AcademicRecord]:
    result = await session.execute(
        select(AcademicRecord)
        .where(AcademicRecord.student_id == student_id)
        .order_by(AcademicRecord.created_at)
    )
    return list(result.scalars().all())
