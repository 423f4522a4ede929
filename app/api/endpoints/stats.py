# app/api/endpoints/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.exceptions import PortalError, to_http
from app.schemas.stats import AchievementOfTheDayResponse, LeaderboardResponse, StatsResponse
from app.services.stats_service import (
    achievement_of_the_day,
    achievement_stats,
    drilldown_stats,
    leaderboard,
)

router = APIRouter(tags=["Stats"])


@router.get("/api/stats/achievement-stats", response_model=StatsResponse)
async def get_achievement_stats(session: AsyncSession = Depends(get_db_session)):
    stats = await achievement_stats(session)
    return StatsResponse(total=sum(s.count for s in stats), stats=stats)


@router.get("/api/stats/achievement-stats/drilldown/{achievement_type}", response_model=StatsResponse)
async def get_drilldown_stats(
    achievement_type: str,
    session: AsyncSession = Depends(get_db_session),
):
    try:
        stats = await drilldown_stats(session, achievement_type)
    except PortalError as e:
        raise to_http(e)
    return StatsResponse(total=sum(s.count for s in stats), stats=stats)


@router.get("/api/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(session: AsyncSession = Depends(get_db_session)):
    return LeaderboardResponse(data=await leaderboard(session))


@router.get("/api/achievement-of-the-day", response_model=AchievementOfTheDayResponse)
async def get_achievement_of_the_day(session: AsyncSession = Depends(get_db_session)):
    return AchievementOfTheDayResponse(data=await achievement_of_the_day(session))
