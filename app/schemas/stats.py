from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.schemas.base import CamelModel


class CategoryStat(CamelModel):
    name: str
    count: int
    percentage: float


class StatsResponse(CamelModel):
    success: bool = True
    total: int
    stats: List[CategoryStat]


class LeaderboardEntry(CamelModel):
    rank: int
    student_id: UUID
    uce: str
    name: str
    total_points: int
    approved_count: int
    badge: Optional[str] = None


class LeaderboardResponse(CamelModel):
    success: bool = True
    data: List[LeaderboardEntry]


class AchievementOfTheDay(CamelModel):
    achievement_id: UUID
    student_name: str
    type: str
    category: str
    event_name: Optional[str] = None
    level: Optional[str] = None
    position: Optional[str] = None
    points: int
    approved_at: Optional[datetime] = None


class AchievementOfTheDayResponse(CamelModel):
    success: bool = True
    data: List[AchievementOfTheDay]
