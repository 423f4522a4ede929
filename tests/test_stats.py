import uuid
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationError
from app.models.enums import AchievementType, VerificationStatus
from app.services.stats_service import (
    achievement_stats,
    achievements_of_the_day,
    build_leaderboard,
    group_by_category,
    group_by_type,
    leaderboard,
    with_percentages,
)

from factories import make_achievement, make_student


def fake_achievement(student_id, category="Hackathon", type_=AchievementType.CoCurricular,
                     status=VerificationStatus.Approved, points=15, decided_at=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        student_id=student_id,
        type=type_,
        category=category,
        details={"eventName": "Hack", "eventDate": "2024-01-01"},
        level="National",
        position="Winner",
        verification_status=status,
        awarded_points=points,
        decided_at=decided_at,
    )


def fake_student(name, uce):
    return SimpleNamespace(id=uuid.uuid4(), full_name=name, uce=uce)


def test_group_by_type_lists_every_type():
    sid = uuid.uuid4()
    counts = group_by_type([
        fake_achievement(sid),
        fake_achievement(sid, "Sports", AchievementType.ExtraCurricular),
        fake_achievement(sid),
    ])
    assert counts == {
        "Co-Curricular": 2,
        "Extra-Curricular": 1,
        "Courses": 0,
        "Special Achievement": 0,
    }


def test_group_by_category_lists_every_sub_type():
    sid = uuid.uuid4()
    counts = group_by_category(
        [fake_achievement(sid, "Sports", AchievementType.ExtraCurricular), fake_achievement(sid)],
        "Extra-Curricular",
    )
    assert counts == {"Sports": 1, "Cultural": 0}


def test_group_by_category_unknown_type():
    with pytest.raises(ValidationError):
        group_by_category([], "Hobbies")


def test_percentages_round_to_one_decimal():
    stats = with_percentages({"A": 1, "B": 2, "C": 0})
    assert [(s.name, s.count, s.percentage) for s in stats] == [
        ("A", 1, 33.3),
        ("B", 2, 66.7),
        ("C", 0, 0.0),
    ]


def test_percentages_on_empty_collection_are_zero():
    stats = with_percentages(group_by_type([]))
    assert len(stats) == 4
    assert all(s.percentage == 0.0 and s.count == 0 for s in stats)


def test_leaderboard_ranks_by_approved_points_with_badges():
    asha, ravi, meera, idle = (
        fake_student("Asha", "UCE1"),
        fake_student("Ravi", "UCE2"),
        fake_student("Meera", "UCE3"),
        fake_student("Idle", "UCE4"),
    )
    achievements = [
        fake_achievement(asha.id, points=15),
        fake_achievement(asha.id, points=10),
        fake_achievement(ravi.id, points=15),
        fake_achievement(ravi.id, points=99, status=VerificationStatus.Rejected),
        fake_achievement(meera.id, points=15),
        fake_achievement(idle.id, points=0, status=VerificationStatus.Pending),
    ]

    board = build_leaderboard([asha, ravi, meera, idle], achievements)

    assert [(e.name, e.total_points, e.rank, e.badge) for e in board] == [
        ("Asha", 25, 1, "Platinum"),
        ("Meera", 15, 2, "Silver"),
        ("Ravi", 15, 2, "Silver"),
    ]
    assert board[0].approved_count == 2


def test_leaderboard_empty():
    assert build_leaderboard([], []) == []


def test_achievements_of_the_day_only_today_and_approved():
    s = fake_student("Asha", "UCE1")
    today = date(2026, 10, 19)
    picks = achievements_of_the_day(
        [
            fake_achievement(s.id, points=5, decided_at=datetime(2026, 10, 19, 9, 0)),
            fake_achievement(s.id, points=15, decided_at=datetime(2026, 10, 19, 11, 0)),
            fake_achievement(s.id, decided_at=datetime(2026, 10, 18, 23, 59)),
            fake_achievement(s.id, status=VerificationStatus.Rejected, points=0,
                             decided_at=datetime(2026, 10, 19, 10, 0)),
        ],
        today,
        [s],
    )

    assert [p.points for p in picks] == [15, 5]
    assert picks[0].student_name == "Asha"
    assert picks[0].event_name == "Hack"


# ===================================================================
# LOADERS
# ===================================================================
@pytest.mark.asyncio
async def test_stats_from_database(db_session):
    student = await make_student(db_session)
    await make_achievement(db_session, student, "Hackathon")
    await make_achievement(db_session, student, "Coursera")
    await make_achievement(db_session, student, "NPTEL")
    await make_achievement(db_session, student, "Scholarship")

    stats = {s.name: s for s in await achievement_stats(db_session)}
    assert stats["Courses"].count == 2
    assert stats["Courses"].percentage == 50.0
    assert stats["Extra-Curricular"].percentage == 0.0


@pytest.mark.asyncio
async def test_leaderboard_from_database(db_session):
    student = await make_student(db_session, full_name="Top Student")
    achievement = await make_achievement(db_session, student, status=VerificationStatus.Approved, score=90)
    achievement.awarded_points = achievement.base_points
    db_session.add(achievement)
    await db_session.commit()

    board = await leaderboard(db_session)
    assert len(board) == 1
    assert board[0].name == "Top Student"
    assert board[0].total_points == 15
    assert board[0].badge == "Silver"
