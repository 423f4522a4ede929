# app/models/achievement.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Any, Optional

from app.models.enums import AchievementType, VerificationStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Achievement(SQLModel, table=True):
    __tablename__ = "achievements"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    student_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    )

    type: AchievementType = Field(
        sa_column=Column(
            SAEnum(AchievementType, name="achievement_type", values_callable=_enum_values),
            nullable=False,
        )
    )

    # Sub-type within the type (Workshop, Hackathon, Sports, ...)
    category: str = Field(sa_column=Column(String, nullable=False, index=True))

    # Validated through app.schemas.details before it is stored
    details: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False)
    )

    # Denormalised from details for report filters
    level: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    position: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    # --- Verification ---
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.Pending,
        sa_column=Column(
            SAEnum(VerificationStatus, name="verification_status", values_callable=_enum_values),
            nullable=False,
            index=True,
        )
    )
    verification_score: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    verification_details: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    base_points: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    awarded_points: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    admin_notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    decided_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    )
    decided_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    email_sent: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    email_sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    # File-store reference owned by the student
    certificate_path: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
