from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, Float, ForeignKey, String, Uuid
from datetime import datetime, timezone
from typing import Optional
import uuid

# ------------------------------------------------------------
# ACADEMIC RECORD (one per exam: SSC, HSC, Diploma, Semester N)
# ------------------------------------------------------------
class AcademicRecord(SQLModel, table=True):
    __tablename__ = "academic_records"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    student_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    )

    exam_type: str = Field(sa_column=Column(String, nullable=False))
    school_college: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    board_university: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    percentage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))

    marksheet_path: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
