import pytest

from app.models.enums import AchievementType
from app.services.points_service import compute_badge, compute_base_points, normalize_position


@pytest.mark.parametrize(
    "category, position, expected",
    [
        ("Hackathon", "Winner", 15),
        ("Hackathon", "Runner-up", 10),
        ("Hackathon", "Participation", 5),
        ("Code Competition", "Winner", 15),
        ("Project Competition", "Winner", 10),
        ("Paper Presentation", "Runner-up", 7),
        ("Paper Presentation", "Participation", 3),
    ],
)
def test_placed_co_curricular_points(category, position, expected):
    assert compute_base_points(AchievementType.CoCurricular, category, position=position) == expected


def test_attendance_events_score_flat():
    for category in ("Workshop", "Seminar/Webinar", "Other"):
        assert compute_base_points(AchievementType.CoCurricular, category) == 2


def test_publication_points_depend_on_indexing():
    assert compute_base_points(AchievementType.CoCurricular, "Paper Publication", indexing="Scopus") == 25
    assert compute_base_points(AchievementType.CoCurricular, "Paper Publication", indexing=" web of science ") == 25
    assert compute_base_points(AchievementType.CoCurricular, "Paper Publication", indexing="None") == 10
    assert compute_base_points(AchievementType.CoCurricular, "Paper Publication") == 10


def test_extra_curricular_points():
    assert compute_base_points(AchievementType.ExtraCurricular, "Sports", position="Winner") == 5
    assert compute_base_points(AchievementType.ExtraCurricular, "Cultural", position="runner up") == 3
    assert compute_base_points(AchievementType.ExtraCurricular, "Cultural", position="Participation") == 1


def test_courses_and_special_achievements_are_flat():
    assert compute_base_points(AchievementType.Courses, "NPTEL") == 5
    assert compute_base_points("Courses", "Udemy") == 5
    assert compute_base_points(AchievementType.SpecialAchievement, "Scholarship") == 20
    assert compute_base_points(AchievementType.SpecialAchievement, "Cash Prize") == 20


def test_level_does_not_change_points():
    national = compute_base_points(AchievementType.CoCurricular, "Hackathon", level="National", position="Winner")
    intra = compute_base_points(AchievementType.CoCurricular, "Hackathon", level="Intra College", position="Winner")
    assert national == intra == 15


def test_unknown_position_scores_as_participation():
    assert compute_base_points(AchievementType.CoCurricular, "Hackathon", position="Special Mention") == 5
    assert compute_base_points(AchievementType.CoCurricular, "Hackathon") == 5


def test_unknown_category_scores_zero():
    assert compute_base_points(AchievementType.CoCurricular, "Quiz") == 0


def test_position_aliases():
    assert normalize_position("first") == "Winner"
    assert normalize_position("Runner Up") == "Runner-up"
    assert normalize_position("participant") == "Participation"
    assert normalize_position("  ") is None
    assert normalize_position("Third") == "Third"


@pytest.mark.parametrize(
    "points, badge",
    [
        (0, None),
        (5, None),
        (6, "Bronze"),
        (10, "Bronze"),
        (11, "Silver"),
        (15, "Silver"),
        (16, "Gold"),
        (20, "Gold"),
        (21, "Platinum"),
        (250, "Platinum"),
    ],
)
def test_badge_thresholds_are_strict(points, badge):
    assert compute_badge(points) == badge
