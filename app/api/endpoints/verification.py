# app/api/endpoints/verification.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, require_admin
from app.core.exceptions import PortalError, to_http
from app.models.enums import VerificationStatus
from app.models.user import User
from app.schemas.achievement import (
    AchievementList,
    BulkResult,
    BulkScoreRequest,
    DecisionRequest,
    DecisionResult,
    ScoreResponse,
)
from app.services.achievement_service import list_by_status, to_queue_item
from app.services.verification_service import bulk_score, decide, score_achievement

router = APIRouter(
    prefix="/api/verification",
    tags=["Verification"]
)

VERIFIED_QUEUE = (
    VerificationStatus.Verified,
    VerificationStatus.Partial,
    VerificationStatus.Failed,
    VerificationStatus.Approved,
)


async def _queue(session: AsyncSession, statuses) -> AchievementList:
    rows = await list_by_status(session, statuses)
    items = [to_queue_item(achievement, student) for achievement, student in rows]
    return AchievementList(count=len(items), achievements=items)


# ===================================================================
# QUEUES
# ===================================================================
@router.get("/pending", response_model=AchievementList)
async def pending_achievements(
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await _queue(session, [VerificationStatus.Pending])


@router.get("/verified", response_model=AchievementList)
async def verified_achievements(
    status: Optional[VerificationStatus] = Query(default=None),
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Scored or approved achievements, optionally narrowed to one status."""
    if status is not None and status not in VERIFIED_QUEUE:
        raise HTTPException(status_code=400, detail=f"Status filter must be one of "
                            f"{', '.join(s.value for s in VERIFIED_QUEUE)}")

    return await _queue(session, [status] if status else VERIFIED_QUEUE)


@router.get("/rejected", response_model=AchievementList)
async def rejected_achievements(
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await _queue(session, [VerificationStatus.Rejected])


# ===================================================================
# SCORING
# ===================================================================
@router.post("/verify/{achievement_id}", response_model=ScoreResponse)
async def verify_achievement(
    achievement_id: str,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        result = await score_achievement(session, achievement_id)
    except PortalError as e:
        raise to_http(e)

    return ScoreResponse(
        message=f"Verification complete: {result.verification_status.value} ({result.overall_score}%)",
        verification_results=result,
    )


@router.post("/bulk-verify", response_model=BulkResult)
async def bulk_verify(
    data: Optional[BulkScoreRequest] = None,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    ids = data.achievement_ids if data else None
    return await bulk_score(session, ids)


# ===================================================================
# ADMIN DECISION
# ===================================================================
@router.post("/manual/{achievement_id}", response_model=DecisionResult)
async def manual_decision(
    achievement_id: str,
    data: DecisionRequest,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await decide(
            session,
            achievement_id,
            data.status,
            notes=data.admin_notes,
            decided_by=current_user.id,
        )
    except PortalError as e:
        raise to_http(e)
