# app/services/achievement_service.py

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.constants import ACHIEVEMENT_SUB_TYPES
from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from app.core.storage import resolve_file_url
from app.models.achievement import Achievement
from app.models.enums import AchievementType, VerificationStatus
from app.models.student import Student
from app.models.user import User, UserRole
from app.schemas.achievement import AchievementCreate, AchievementQueueItem, AchievementRead
from app.schemas.details import AchievementDetails, parse_details
from app.services.points_service import compute_base_points


def _as_uuid(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(f"Achievement '{value}' not found")


def details_of(achievement: Achievement) -> AchievementDetails:
    return parse_details(achievement.category, achievement.details)


async def get_achievement(session: AsyncSession, achievement_id) -> Achievement:
    achievement = await session.get(Achievement, _as_uuid(achievement_id))
    if not achievement:
        raise NotFoundError(f"Achievement '{achievement_id}' not found")
    return achievement


async def create_achievement(
    session: AsyncSession,
    student_id: UUID,
    payload: AchievementCreate,
) -> Achievement:
    """Student submission: validates the details for the sub-type and prices it."""
    sub_types = ACHIEVEMENT_SUB_TYPES[AchievementType(payload.type)]
    if payload.category not in sub_types:
        raise ValidationError(
            f"'{payload.category}' is not a {payload.type.value} activity. "
            f"Expected one of: {', '.join(sub_types)}"
        )

    details = parse_details(payload.category, payload.details)

    achievement = Achievement(
        student_id=student_id,
        type=payload.type,
        category=payload.category,
        details=details.to_storage(),
        level=details.level_value,
        position=details.position_value,
        certificate_path=payload.certificate_path,
        verification_status=VerificationStatus.Pending,
        base_points=compute_base_points(
            payload.type,
            payload.category,
            level=details.level_value,
            position=details.position_value,
            indexing=details.indexing_value,
        ),
    )
    session.add(achievement)
    await session.commit()
    await session.refresh(achievement)

    logger.info(
        f"Achievement {achievement.id} submitted ({achievement.type.value}/{achievement.category}, "
        f"{achievement.base_points} potential points)"
    )
    return achievement


async def list_student_achievements(session: AsyncSession, student_id: UUID) -> List[Achievement]:
    result = await session.execute(
        select(Achievement)
        .where(Achievement.student_id == student_id)
        .order_by(Achievement.created_at.desc())
    )
    return list(result.scalars().all())


async def list_by_status(
    session: AsyncSession,
    statuses: Iterable[VerificationStatus],
) -> List[Tuple[Achievement, Student]]:
    result = await session.execute(
        select(Achievement, Student)
        .join(Student, Student.id == Achievement.student_id)
        .where(Achievement.verification_status.in_(list(statuses)))
        .order_by(Achievement.created_at.desc())
    )
    return list(result.all())


def to_queue_item(achievement: Achievement, student: Optional[Student]) -> AchievementQueueItem:
    details = details_of(achievement)
    base = AchievementRead.model_validate(achievement)
    return AchievementQueueItem(
        **base.model_dump(),
        uce=student.uce if student else None,
        student_name=student.full_name if student else None,
        student_email=student.email if student else None,
        event_name=details.display_name(),
        organizer=details.organizer(),
        certificate_url=resolve_file_url(achievement.certificate_path),
    )


async def delete_achievement(session: AsyncSession, achievement_id, actor: User) -> None:
    achievement = await get_achievement(session, achievement_id)

    if actor.role != UserRole.Admin:
        if actor.student_id != achievement.student_id:
            raise PermissionDeniedError("You can only delete your own achievements")
        if achievement.verification_status == VerificationStatus.Approved:
            raise PermissionDeniedError("Approved achievements can only be removed by an admin")

    await session.delete(achievement)
    await session.commit()
    logger.info(f"Achievement {achievement_id} deleted by {actor.role.value} {actor.id}")


async def update_admin_notes(session: AsyncSession, achievement_id, notes: str) -> Achievement:
    """Notes are the only field that stays editable after a decision."""
    achievement = await get_achievement(session, achievement_id)
    achievement.admin_notes = notes
    achievement.updated_at = datetime.now(timezone.utc)
    session.add(achievement)
    await session.commit()
    await session.refresh(achievement)
    return achievement
