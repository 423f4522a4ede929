# app/services/report_service.py
"""
Filter-driven admin reports.

A report is one or more sections. A specific sub-type (or no sub-type) gives
one section; sub-type "ALL" under a specific category fans out into one
section per sub-type, run one after another. A failing branch is recorded
as FAILED and the others still run.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.constants import (
    ACADEMIC_FIELDS,
    ACHIEVEMENT_COLUMN_FIELDS,
    ACHIEVEMENT_SUB_TYPES,
    ALL_CATEGORIES,
    ALL_LEVELS,
    ALL_LOCATIONS,
    ALL_POSITIONS,
    ALL_SUB_TYPES,
    FIELD_LABELS,
    FILTER_SPECIFIC_FIELDS,
    FILTERABLE_TYPES,
    LEVEL_OPTIONS,
    LOCATION_OPTIONS,
    POSITION_OPTIONS,
    STUDENT_FIELDS,
    SUB_TYPE_FIELDS,
    applicable_fields,
    label_for,
    location_field_for,
    type_of_sub_type,
)
from app.core.exceptions import PortalError, ValidationError
from app.models.academic import AcademicRecord
from app.models.achievement import Achievement
from app.models.enums import AchievementType, ReportStatus
from app.models.student import Student
from app.schemas.report import (
    FieldOptions,
    ReportQuery,
    ReportRequest,
    ReportResponse,
    ReportSection,
    YearRange,
)
from app.services.achievement_service import details_of
from app.services.points_service import normalize_position

ACHIEVEMENT_FIELDS = [
    key for key in FIELD_LABELS if key not in STUDENT_FIELDS and key not in ACADEMIC_FIELDS
]

LOCATION_LABELS = {
    "Workshop": "Workshop Location",
    "Seminar/Webinar": "Seminar Location",
    "Hackathon": "Organizer Location",
    "Code Competition": "Organizer Location",
    "Other": "Other Location",
}
DEFAULT_LOCATION_LABEL = "Competition Location"

_STUDENT_ATTRS = {
    "uce": "uce",
    "Name": "full_name",
    "DOB": "dob",
    "Gender": "gender",
    "bloodGroup": "blood_group",
    "Address": "address",
    "Phone": "phone",
    "Email": "email",
    "Department": "department",
    "Year": "year",
    "Semester": "semester",
    "Section": "section",
    "Batch": "batch",
    "cgpa": "cgpa",
}

_ACADEMIC_ATTRS = {
    "examType": "exam_type",
    "schoolCollege": "school_college",
    "boardUniversity": "board_university",
    "percentage": "percentage",
    "marksheetPath": "marksheet_path",
}

_ACHIEVEMENT_ATTRS = {
    "type": "type",
    "category": "category",
    "level": "level",
    "position": "position",
    "verificationStatus": "verification_status",
    "verificationScore": "verification_score",
    "awardedPoints": "awarded_points",
    "certificatePath": "certificate_path",
}


# ==========================================================
# FILTER RULES
# ==========================================================
def filters_enabled(category: Optional[str]) -> bool:
    if not category or category == ALL_CATEGORIES:
        return False
    try:
        return AchievementType(category) in FILTERABLE_TYPES
    except ValueError:
        return False


def location_field_label(sub_type: Optional[str]) -> str:
    return LOCATION_LABELS.get(sub_type or "", DEFAULT_LOCATION_LABEL)


def field_options() -> FieldOptions:
    return FieldOptions(
        student=STUDENT_FIELDS,
        achievement=ACHIEVEMENT_FIELDS,
        academic=ACADEMIC_FIELDS,
        labels=FIELD_LABELS,
        sub_types={t.value: subs for t, subs in ACHIEVEMENT_SUB_TYPES.items()},
        sub_type_fields={sub: applicable_fields(sub) for sub in SUB_TYPE_FIELDS},
        filter_options={
            "location": [ALL_LOCATIONS] + LOCATION_OPTIONS,
            "level": [ALL_LEVELS] + LEVEL_OPTIONS,
            "position": [ALL_POSITIONS] + POSITION_OPTIONS,
        },
        filter_specific_fields=FILTER_SPECIFIC_FIELDS,
    )


# ==========================================================
# VALIDATION
# ==========================================================
def _specific(value: Optional[str], sentinel: str) -> Optional[str]:
    if not value or value == sentinel:
        return None
    return value


def validate_request(request: ReportRequest) -> None:
    """Every check here runs before any query is issued."""
    if not (request.student_fields or request.achievement_fields or request.academic_fields):
        raise ValidationError("Select at least one field")

    if request.start_year is not None and request.end_year is not None:
        if request.start_year > request.end_year:
            raise ValidationError(
                f"Start year ({request.start_year}) must be less than or equal to "
                f"end year ({request.end_year})"
            )

    unknown = (
        [f for f in request.student_fields if f not in STUDENT_FIELDS]
        + [f for f in request.academic_fields if f not in ACADEMIC_FIELDS]
        + [f for f in request.achievement_fields if f not in ACHIEVEMENT_FIELDS]
    )
    if unknown:
        raise ValidationError(f"Unknown report fields: {', '.join(unknown)}")

    category = _specific(request.achievement_category, ALL_CATEGORIES)
    if category is not None:
        try:
            AchievementType(category)
        except ValueError:
            raise ValidationError(f"Unknown achievement category '{category}'")

    sub_type = _specific(request.achievement_sub_type, ALL_SUB_TYPES)
    if sub_type is not None:
        owner = type_of_sub_type(sub_type)
        if owner is None:
            raise ValidationError(f"Unknown achievement sub-type '{sub_type}'")
        if category is not None and owner != AchievementType(category):
            raise ValidationError(f"'{sub_type}' is not a {category} sub-type")


# ==========================================================
# QUERY PAYLOAD
# ==========================================================
def build_query(request: ReportRequest, sub_type: Optional[str]) -> ReportQuery:
    """
    Normalizes one section's query. Location, level and position filters
    only survive for Co-Curricular and Extra-Curricular reports.
    """
    category = _specific(request.achievement_category, ALL_CATEGORIES)
    sub_type = _specific(sub_type, ALL_SUB_TYPES)
    enabled = filters_enabled(category)

    achievement_fields = list(request.achievement_fields)
    achievement_filters: Dict[str, Dict[str, str]] = {}

    if enabled:
        location_filter = request.competition_location_filter or ALL_LOCATIONS
        level_filter = request.level_filter or ALL_LEVELS
        if request.position_filter and request.position_filter != ALL_POSITIONS:
            achievement_filters[category] = {"position": normalize_position(request.position_filter)}
    else:
        location_filter = ALL_LOCATIONS
        level_filter = ALL_LEVELS
        achievement_fields = [f for f in achievement_fields if f not in FILTER_SPECIFIC_FIELDS]

    date_range = None
    if request.start_year is not None and request.end_year is not None:
        date_range = YearRange(start=request.start_year, end=request.end_year)

    return ReportQuery(
        student_fields=list(request.student_fields),
        achievement_fields=achievement_fields,
        academic_fields=list(request.academic_fields),
        achievement_category=category,
        achievement_sub_type=sub_type,
        achievement_filters=achievement_filters,
        competition_location_filter=location_filter,
        level_filter=level_filter,
        filters_enabled=enabled,
        location_field=location_field_for(sub_type) if enabled else None,
        date_range=date_range,
    )


def section_fields(query: ReportQuery) -> List[str]:
    return query.student_fields + query.academic_fields + query.achievement_fields


# ==========================================================
# PERSISTENCE QUERY
# ==========================================================
def _scalar(value):
    if value is None:
        return None
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _student_values(student: Student, fields: List[str]) -> Dict[str, Any]:
    return {f: _scalar(getattr(student, _STUDENT_ATTRS[f])) for f in fields}


def _academic_values(records: List[AcademicRecord], fields: List[str]) -> Dict[str, Any]:
    # One student may hold several records; each field becomes a list
    return {
        f: [_scalar(getattr(r, _ACADEMIC_ATTRS[f])) for r in records if getattr(r, _ACADEMIC_ATTRS[f]) is not None]
        for f in fields
    }


def _achievement_values(achievement: Achievement, fields: List[str]) -> Dict[str, Any]:
    details = achievement.details or {}
    values = {}
    for f in fields:
        if f in ACHIEVEMENT_COLUMN_FIELDS:
            values[f] = _scalar(getattr(achievement, _ACHIEVEMENT_ATTRS[f]))
        elif f == "authors":
            values[f] = [details[k] for k in ("author1", "author2", "author3") if details.get(k)]
        else:
            values[f] = details.get(f)
    return values


def _matches(achievement: Achievement, query: ReportQuery) -> bool:
    details = details_of(achievement)

    if query.competition_location_filter != ALL_LOCATIONS:
        location = details.location()
        if not location or location.lower() != query.competition_location_filter.lower():
            return False

    if query.date_range is not None:
        year = details.year()
        if year is None or not (query.date_range.start <= year <= query.date_range.end):
            return False

    return True


async def _academics_by_student(session: AsyncSession, student_ids) -> Dict[Any, List[AcademicRecord]]:
    grouped = defaultdict(list)
    if not student_ids:
        return grouped
    result = await session.execute(
        select(AcademicRecord)
        .where(AcademicRecord.student_id.in_(list(student_ids)))
        .order_by(AcademicRecord.created_at)
    )
    for record in result.scalars().all():
        grouped[record.student_id].append(record)
    return grouped


async def run_report_query(session: AsyncSession, query: ReportQuery) -> List[Dict[str, Any]]:
    """
    Flat rows keyed by registry field keys: one per achievement when the
    report touches achievements, otherwise one per student.
    """
    per_achievement = bool(
        query.achievement_fields
        or query.achievement_category
        or query.achievement_sub_type
        or query.date_range
    )

    if not per_achievement:
        students = (await session.execute(select(Student).order_by(Student.uce))).scalars().all()
        pairs = [(None, s) for s in students]
    else:
        stmt = select(Achievement, Student).join(Student, Student.id == Achievement.student_id)
        if query.achievement_category:
            stmt = stmt.where(Achievement.type == AchievementType(query.achievement_category))
        if query.achievement_sub_type:
            stmt = stmt.where(Achievement.category == query.achievement_sub_type)
        if query.level_filter != ALL_LEVELS:
            stmt = stmt.where(Achievement.level == query.level_filter)
        position = query.achievement_filters.get(query.achievement_category or "", {}).get("position")
        if position:
            stmt = stmt.where(Achievement.position == position)

        stmt = stmt.order_by(Student.uce, Achievement.created_at)
        pairs = [
            (achievement, student)
            for achievement, student in (await session.execute(stmt)).all()
            if _matches(achievement, query)
        ]

    academics = {}
    if query.academic_fields:
        academics = await _academics_by_student(session, {s.id for _, s in pairs})

    rows = []
    for achievement, student in pairs:
        row = _student_values(student, query.student_fields)
        if query.academic_fields:
            row.update(_academic_values(academics.get(student.id, []), query.academic_fields))
        if achievement is not None:
            row.update(_achievement_values(achievement, query.achievement_fields))
        rows.append(row)
    return rows


# ==========================================================
# REPORT
# ==========================================================
def _labels(fields: List[str], query: ReportQuery) -> Dict[str, str]:
    labels = {f: label_for(f) for f in fields}
    if query.location_field and query.location_field in labels:
        labels[query.location_field] = location_field_label(query.achievement_sub_type)
    return labels


async def _run_section(session: AsyncSession, request: ReportRequest, sub_type: Optional[str]) -> ReportSection:
    query = build_query(request, sub_type)
    fields = section_fields(query)
    try:
        rows = await run_report_query(session, query)
    except (PortalError, SQLAlchemyError) as e:
        await session.rollback()
        logger.warning(f"Report section '{sub_type or 'all'}' failed: {e}")
        return ReportSection(
            sub_type=sub_type,
            status=ReportStatus.Failed,
            fields=fields,
            labels=_labels(fields, query),
            error=str(e),
        )

    return ReportSection(
        sub_type=sub_type,
        status=ReportStatus.Ready if rows else ReportStatus.Empty,
        fields=fields,
        labels=_labels(fields, query),
        rows=rows,
        count=len(rows),
    )


async def generate_report(session: AsyncSession, request: ReportRequest) -> ReportResponse:
    validate_request(request)

    category = _specific(request.achievement_category, ALL_CATEGORIES)
    requested_sub_type = request.achievement_sub_type

    if category is not None and requested_sub_type == ALL_SUB_TYPES:
        branches = list(ACHIEVEMENT_SUB_TYPES[AchievementType(category)])
    else:
        branches = [_specific(requested_sub_type, ALL_SUB_TYPES)]

    # Filter-specific fields are dropped outside Co-Curricular and Extra-Curricular
    if not section_fields(build_query(request, branches[0])):
        raise ValidationError(
            f"None of the selected fields apply to {category or ALL_CATEGORIES} reports; "
            f"location, level and position are only available for "
            f"{AchievementType.CoCurricular.value} and {AchievementType.ExtraCurricular.value}"
        )

    sections = []
    for sub_type in branches:
        sections.append(await _run_section(session, request, sub_type))

    total = sum(s.count for s in sections)
    if total:
        status = ReportStatus.Ready
        message = None
    elif all(s.status == ReportStatus.Failed for s in sections):
        status = ReportStatus.Failed
        message = "Report generation failed"
    else:
        status = ReportStatus.Empty
        message = "No data found matching the selected filters"

    logger.info(
        f"Report generated: category={category or ALL_CATEGORIES}, "
        f"sub_type={requested_sub_type or '-'}, sections={len(sections)}, rows={total}"
    )
    return ReportResponse(
        category=category,
        sub_type=requested_sub_type,
        filters_enabled=filters_enabled(category),
        location_label=location_field_label(_specific(requested_sub_type, ALL_SUB_TYPES)),
        status=status,
        total=total,
        sections=sections,
        message=message,
    )
