# app/schemas/report.py
from pydantic import Field
from typing import Any, Dict, List, Optional

from app.core.constants import ALL_LEVELS, ALL_LOCATIONS, ALL_POSITIONS
from app.models.enums import ReportStatus
from app.schemas.base import CamelModel


class ReportRequest(CamelModel):
    student_fields: List[str] = Field(default_factory=list)
    achievement_fields: List[str] = Field(default_factory=list)
    academic_fields: List[str] = Field(default_factory=list)

    achievement_category: Optional[str] = None
    achievement_sub_type: Optional[str] = None

    competition_location_filter: str = ALL_LOCATIONS
    level_filter: str = ALL_LEVELS
    position_filter: str = ALL_POSITIONS

    start_year: Optional[int] = None
    end_year: Optional[int] = None


class YearRange(CamelModel):
    start: int
    end: int


class ReportQuery(CamelModel):
    """Normalized payload handed to the persistence query."""

    student_fields: List[str]
    achievement_fields: List[str]
    academic_fields: List[str]
    achievement_category: Optional[str] = None
    achievement_sub_type: Optional[str] = None
    achievement_filters: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    competition_location_filter: str = ALL_LOCATIONS
    level_filter: str = ALL_LEVELS
    filters_enabled: bool = False
    location_field: Optional[str] = None
    date_range: Optional[YearRange] = None


class ReportSection(CamelModel):
    sub_type: Optional[str] = None
    status: ReportStatus
    fields: List[str] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    error: Optional[str] = None


class ReportResponse(CamelModel):
    category: Optional[str] = None
    sub_type: Optional[str] = None
    filters_enabled: bool
    location_label: str
    status: ReportStatus
    total: int
    sections: List[ReportSection]
    message: Optional[str] = None


class FieldOptions(CamelModel):
    student: List[str]
    achievement: List[str]
    academic: List[str]
    labels: Dict[str, str]
    sub_types: Dict[str, List[str]]
    sub_type_fields: Dict[str, List[str]]
    filter_options: Dict[str, List[str]]
    filter_specific_fields: List[str]
