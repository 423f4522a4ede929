from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text, String, Float, Uuid, DateTime
from uuid import uuid4
from datetime import date, datetime, timezone
from typing import Optional
import uuid


class Student(SQLModel, table=True):
    __tablename__ = "students"

    id: uuid.UUID = Field(
        default_factory=uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    # UCE/USN enrollment identifier
    uce: str = Field(
        sa_column=Column(String, nullable=False, unique=True, index=True)
    )

    full_name: str = Field(
        sa_column=Column(String, nullable=False)
    )

    email: str = Field(
        sa_column=Column(String, nullable=False, unique=True)
    )

    dob: Optional[date] = Field(default=None)

    gender: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    blood_group: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    address: Optional[str] = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
    phone: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    department: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    year: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    semester: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    section: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    batch: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    cgpa: Optional[float] = Field(
        default=None, sa_column=Column(Float, nullable=True)
    )

    # Opaque file-store reference, never the bytes
    photo_ref: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
