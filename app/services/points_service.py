# app/services/points_service.py
"""
Leaderboard point table and badge tiers. Pure functions, no I/O.
"""

from typing import Optional

WINNER = "Winner"
RUNNER_UP = "Runner-up"
PARTICIPATION = "Participation"

_POSITION_ALIASES = {
    "winner": WINNER,
    "first": WINNER,
    "runner-up": RUNNER_UP,
    "runner up": RUNNER_UP,
    "runnerup": RUNNER_UP,
    "second": RUNNER_UP,
    "participation": PARTICIPATION,
    "participant": PARTICIPATION,
}

# Indexing values that count as an indexed publication
INDEXED_VALUES = {"scopus", "sci", "scie", "web of science", "ugc care"}

# category -> {position: points}
PLACED_POINTS = {
    "Hackathon": {WINNER: 15, RUNNER_UP: 10, PARTICIPATION: 5},
    "Code Competition": {WINNER: 15, RUNNER_UP: 10, PARTICIPATION: 5},
    "Project Competition": {WINNER: 10, RUNNER_UP: 7, PARTICIPATION: 3},
    "Paper Presentation": {WINNER: 10, RUNNER_UP: 7, PARTICIPATION: 3},
    "Sports": {WINNER: 5, RUNNER_UP: 3, PARTICIPATION: 1},
    "Cultural": {WINNER: 5, RUNNER_UP: 3, PARTICIPATION: 1},
}

ATTENDANCE_POINTS = {
    "Workshop": 2,
    "Seminar/Webinar": 2,
    "Other": 2,
}

PUBLICATION_INDEXED_POINTS = 25
PUBLICATION_OTHER_POINTS = 10
COURSE_COMPLETION_POINTS = 5
SPECIAL_ACHIEVEMENT_POINTS = 20

# Checked top-down, strictly greater-than
BADGE_TIERS = [
    (20, "Platinum"),
    (15, "Gold"),
    (10, "Silver"),
    (5, "Bronze"),
]


def normalize_position(position: Optional[str]) -> Optional[str]:
    if position is None:
        return None
    key = str(position).strip().lower()
    if not key:
        return None
    return _POSITION_ALIASES.get(key, str(position).strip())


def is_indexed(indexing: Optional[str]) -> bool:
    return bool(indexing) and indexing.strip().lower() in INDEXED_VALUES


def compute_base_points(
    achievement_type: str,
    category: Optional[str] = None,
    level: Optional[str] = None,
    position: Optional[str] = None,
    indexing: Optional[str] = None,
) -> int:
    """
    Points an achievement is worth if approved.

    `level` is part of the lookup key but no row of the current table
    varies by it. Unknown positions on placed categories score as
    participation; unknown categories score 0.
    """
    achievement_type = getattr(achievement_type, "value", achievement_type)

    if achievement_type == "Special Achievement":
        return SPECIAL_ACHIEVEMENT_POINTS

    if achievement_type == "Courses":
        return COURSE_COMPLETION_POINTS

    if category == "Paper Publication":
        return PUBLICATION_INDEXED_POINTS if is_indexed(indexing) else PUBLICATION_OTHER_POINTS

    if category in PLACED_POINTS:
        table = PLACED_POINTS[category]
        return table.get(normalize_position(position), table[PARTICIPATION])

    return ATTENDANCE_POINTS.get(category, 0)


def compute_badge(total_points: int) -> Optional[str]:
    for threshold, badge in BADGE_TIERS:
        if total_points > threshold:
            return badge
    return None
