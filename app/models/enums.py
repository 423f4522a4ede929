from enum import Enum

class AchievementType(str, Enum):
    CoCurricular = "Co-Curricular"
    ExtraCurricular = "Extra-Curricular"
    Courses = "Courses"
    SpecialAchievement = "Special Achievement"


class VerificationStatus(str, Enum):
    Pending = "PENDING"
    Verified = "VERIFIED"
    Partial = "PARTIAL"
    Failed = "FAILED"
    Approved = "APPROVED"
    Rejected = "REJECTED"


TERMINAL_STATUSES = (VerificationStatus.Approved, VerificationStatus.Rejected)
SCORED_STATUSES = (VerificationStatus.Verified, VerificationStatus.Partial, VerificationStatus.Failed)


class Decision(str, Enum):
    Approved = "APPROVED"
    Rejected = "REJECTED"


class ReportStatus(str, Enum):
    Ready = "READY"
    Empty = "EMPTY"
    Failed = "FAILED"


class ExportFormat(str, Enum):
    csv = "csv"
    pdf = "pdf"
    docx = "docx"
