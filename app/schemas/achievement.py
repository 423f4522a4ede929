# app/schemas/achievement.py
from pydantic import Field
from typing import Any, List, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import AchievementType, Decision, VerificationStatus
from app.schemas.base import CamelModel


# ------------------------------------------------------------
# STUDENT SUBMISSION
# ------------------------------------------------------------
class AchievementCreate(CamelModel):
    type: AchievementType
    category: str
    details: dict[str, Any] = Field(default_factory=dict)
    certificate_path: Optional[str] = None


class AchievementRead(CamelModel):
    id: UUID
    student_id: UUID
    type: AchievementType
    category: str
    details: dict[str, Any]
    level: Optional[str] = None
    position: Optional[str] = None
    verification_status: VerificationStatus
    verification_score: Optional[float] = None
    base_points: int
    awarded_points: int
    admin_notes: Optional[str] = None
    email_sent: bool
    email_sent_at: Optional[datetime] = None
    certificate_path: Optional[str] = None
    decided_at: Optional[datetime] = None
    created_at: datetime


class AchievementQueueItem(AchievementRead):
    """Admin queue row: achievement plus the owner's contact details."""

    uce: Optional[str] = None
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    event_name: Optional[str] = None
    organizer: Optional[str] = None
    certificate_url: Optional[str] = None


class AchievementList(CamelModel):
    count: int
    achievements: List[AchievementQueueItem]


class NotesUpdate(CamelModel):
    admin_notes: str


# ------------------------------------------------------------
# SCORING
# ------------------------------------------------------------
class FieldMatch(CamelModel):
    field: str
    form_value: Optional[Any] = None
    confidence: Optional[float] = None
    weightage: Optional[float] = None


class FieldMismatch(CamelModel):
    field: str
    form_value: Optional[Any] = None
    suggestion: Optional[str] = None
    weightage: Optional[float] = None


class ScoreResult(CamelModel):
    overall_score: float = Field(ge=0, le=100)
    verification_status: VerificationStatus
    matches: List[FieldMatch] = Field(default_factory=list)
    mismatches: List[FieldMismatch] = Field(default_factory=list)


class ScoreResponse(CamelModel):
    message: str
    verification_results: ScoreResult


class BulkScoreRequest(CamelModel):
    achievement_ids: Optional[List[UUID]] = None


class BulkResult(CamelModel):
    total: int = 0
    verified: int = 0
    partial: int = 0
    failed: int = 0
    errors: int = 0


# ------------------------------------------------------------
# ADMIN DECISION
# ------------------------------------------------------------
class DecisionRequest(CamelModel):
    status: Decision
    admin_notes: Optional[str] = None


class DecisionResult(CamelModel):
    points_awarded: int
    email_sent: bool
    message: str
