# app/api/endpoints/students.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_student, get_current_user, get_db_session
from app.core.exceptions import PortalError, to_http
from app.models.student import Student
from app.models.user import User, UserRole
from app.schemas.student import (
    AcademicRecordCreate,
    AcademicRecordRead,
    StudentCreate,
    StudentRead,
)
from app.services.student_service import (
    add_academic_record,
    create_student_profile,
    list_academic_records,
)

router = APIRouter(
    prefix="/api/students",
    tags=["Students"]
)


# ------------------------------------------------------------
# CREATE PROFILE (student for self, or admin)
# ------------------------------------------------------------
@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: StudentCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    if current_user.role == UserRole.Student and current_user.student_id:
        raise HTTPException(status_code=400, detail="Student profile already exists")

    try:
        return await create_student_profile(session, data, current_user)
    except PortalError as e:
        raise to_http(e)


# ------------------------------------------------------------
# GET "MY PROFILE"
# ------------------------------------------------------------
@router.get("/me", response_model=StudentRead)
async def my_profile(student: Student = Depends(get_current_student)):
    return student


# ------------------------------------------------------------
# ACADEMIC RECORDS
# ------------------------------------------------------------
@router.post("/me/academics", response_model=AcademicRecordRead, status_code=status.HTTP_201_CREATED)
async def submit_academic_record(
    data: AcademicRecordCreate,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await add_academic_record(session, student.id, data)


@router.get("/me/academics", response_model=List[AcademicRecordRead])
async def my_academic_records(
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_academic_records(session, student.id)
