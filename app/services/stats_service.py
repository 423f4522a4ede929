# app/services/stats_service.py

from collections import Counter
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.constants import ACHIEVEMENT_SUB_TYPES
from app.core.exceptions import ValidationError
from app.models.achievement import Achievement
from app.models.enums import AchievementType, VerificationStatus
from app.models.student import Student
from app.schemas.stats import AchievementOfTheDay, CategoryStat, LeaderboardEntry
from app.services.achievement_service import details_of
from app.services.points_service import compute_badge


# ===================================================================
# PURE AGGREGATES
# ===================================================================
def group_by_type(achievements: Iterable[Achievement]) -> Dict[str, int]:
    counts = {t.value: 0 for t in ACHIEVEMENT_SUB_TYPES}
    for a in achievements:
        key = AchievementType(a.type).value
        if key in counts:
            counts[key] += 1
    return counts


def group_by_category(achievements: Iterable[Achievement], achievement_type) -> Dict[str, int]:
    try:
        achievement_type = AchievementType(achievement_type)
    except ValueError:
        raise ValidationError(f"Unknown achievement type '{achievement_type}'")

    counts = {sub_type: 0 for sub_type in ACHIEVEMENT_SUB_TYPES[achievement_type]}
    for a in achievements:
        if AchievementType(a.type) == achievement_type and a.category in counts:
            counts[a.category] += 1
    return counts


def with_percentages(counts: Dict[str, int]) -> List[CategoryStat]:
    total = sum(counts.values())
    return [
        CategoryStat(
            name=name,
            count=count,
            percentage=round(count / total * 100, 1) if total else 0.0,
        )
        for name, count in counts.items()
    ]


def build_leaderboard(
    students: Iterable[Student],
    achievements: Iterable[Achievement],
) -> List[LeaderboardEntry]:
    """
    Ranks students by approved points, highest first. Equal totals share a
    rank (1, 1, 3). Students with nothing approved are left off.
    """
    points = Counter()
    approved = Counter()
    for a in achievements:
        if a.verification_status == VerificationStatus.Approved:
            points[a.student_id] += a.awarded_points or 0
            approved[a.student_id] += 1

    ordered = sorted(
        (s for s in students if approved[s.id]),
        key=lambda s: (-points[s.id], -approved[s.id], s.full_name or ""),
    )

    entries = []
    for position, student in enumerate(ordered, start=1):
        total = points[student.id]
        if entries and entries[-1].total_points == total:
            rank = entries[-1].rank
        else:
            rank = position
        entries.append(
            LeaderboardEntry(
                rank=rank,
                student_id=student.id,
                uce=student.uce,
                name=student.full_name,
                total_points=total,
                approved_count=approved[student.id],
                badge=compute_badge(total),
            )
        )
    return entries


def achievements_of_the_day(
    achievements: Iterable[Achievement],
    today: date,
    students: Iterable[Student] = (),
) -> List[AchievementOfTheDay]:
    names = {s.id: s.full_name for s in students}
    picks = [
        a for a in achievements
        if a.verification_status == VerificationStatus.Approved
        and a.decided_at is not None
        and a.decided_at.date() == today
    ]
    picks.sort(key=lambda a: (-(a.awarded_points or 0), a.decided_at))

    return [
        AchievementOfTheDay(
            achievement_id=a.id,
            student_name=names.get(a.student_id, "Unknown"),
            type=AchievementType(a.type).value,
            category=a.category,
            event_name=details_of(a).display_name(),
            level=a.level,
            position=a.position,
            points=a.awarded_points or 0,
            approved_at=a.decided_at,
        )
        for a in picks
    ]


# ===================================================================
# LOADERS
# ===================================================================
async def _all_achievements(session: AsyncSession) -> List[Achievement]:
    return list((await session.execute(select(Achievement))).scalars().all())


async def achievement_stats(session: AsyncSession) -> List[CategoryStat]:
    return with_percentages(group_by_type(await _all_achievements(session)))


async def drilldown_stats(session: AsyncSession, achievement_type: str) -> List[CategoryStat]:
    return with_percentages(group_by_category(await _all_achievements(session), achievement_type))


async def leaderboard(session: AsyncSession) -> List[LeaderboardEntry]:
    approved = (
        await session.execute(
            select(Achievement).where(Achievement.verification_status == VerificationStatus.Approved)
        )
    ).scalars().all()
    students = (await session.execute(select(Student))).scalars().all()
    return build_leaderboard(students, approved)


async def achievement_of_the_day(
    session: AsyncSession,
    today: Optional[date] = None,
) -> List[AchievementOfTheDay]:
    today = today or datetime.now(timezone.utc).date()
    approved = (
        await session.execute(
            select(Achievement).where(Achievement.verification_status == VerificationStatus.Approved)
        )
    ).scalars().all()
    students = (await session.execute(select(Student))).scalars().all()
    return achievements_of_the_day(approved, today, students)
