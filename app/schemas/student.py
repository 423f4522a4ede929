# app/schemas/student.py
from pydantic import EmailStr, field_validator
from typing import Optional
from uuid import UUID
from datetime import date, datetime

from app.schemas.base import CamelModel


# ------------------------------------------------------------
# STUDENT PROFILE
# ------------------------------------------------------------
class StudentCreate(CamelModel):
    uce: str
    full_name: str
    email: EmailStr
    dob: Optional[date] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    section: Optional[str] = None
    batch: Optional[str] = None
    cgpa: Optional[float] = None
    photo_ref: Optional[str] = None

    @field_validator("uce")
    @classmethod
    def normalize_uce(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("UCE number is required")
        return v

    @field_validator("cgpa")
    @classmethod
    def cgpa_range(cls, v):
        if v is not None and not 0 <= v <= 10:
            raise ValueError("CGPA must be between 0 and 10")
        return v


class StudentRead(StudentCreate):
    id: UUID
    created_at: datetime


# ------------------------------------------------------------
# ACADEMIC RECORDS
# ------------------------------------------------------------
class AcademicRecordCreate(CamelModel):
    exam_type: str
    school_college: Optional[str] = None
    board_university: Optional[str] = None
    percentage: Optional[float] = None
    marksheet_path: Optional[str] = None

    @field_validator("percentage")
    @classmethod
    def percentage_range(cls, v):
        if v is not None and not 0 <= v <= 100:
            raise ValueError("Percentage must be between 0 and 100")
        return v


class AcademicRecordRead(AcademicRecordCreate):
    id: UUID
    student_id: UUID
    created_at: datetime
