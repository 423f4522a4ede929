# app/services/verification_service.py
"""
Achievement verification lifecycle.

    PENDING -> VERIFIED | PARTIAL | FAILED -> APPROVED | REJECTED
    PENDING -> REJECTED

Scores come from the external scoring engine; APPROVED and REJECTED are
only ever set by an admin decision and are final.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import settings
from app.core.exceptions import (
    AlreadyDecidedError,
    CollaboratorError,
    PortalError,
    ScoreTooLowError,
    ValidationError,
)
from app.models.achievement import Achievement
from app.models.enums import SCORED_STATUSES, TERMINAL_STATUSES, Decision, VerificationStatus
from app.models.student import Student
from app.schemas.achievement import BulkResult, DecisionResult, ScoreResult
from app.services.achievement_service import details_of, get_achievement
from app.services.email_service import send_decision_email
from app.services.scoring_service import request_score


# ===================================================================
# SCORING
# ===================================================================
async def _write_score(session: AsyncSession, achievement_id, result: ScoreResult) -> Optional[VerificationStatus]:
    """
    Conditional writes keyed on the row's current status.

    Returns None when the scoring status was applied, otherwise the terminal
    status the row already holds. APPROVED rows take only the match report,
    REJECTED rows take the report and the new score.
    """
    now = datetime.now(timezone.utc)
    report = result.model_dump(mode="json", by_alias=True)

    scored = await session.execute(
        update(Achievement)
        .where(Achievement.id == achievement_id)
        .where(Achievement.verification_status.notin_(TERMINAL_STATUSES))
        .values(
            verification_status=result.verification_status,
            verification_score=result.overall_score,
            verification_details=report,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if scored.rowcount == 1:
        await session.commit()
        return None

    rejected = await session.execute(
        update(Achievement)
        .where(Achievement.id == achievement_id)
        .where(Achievement.verification_status == VerificationStatus.Rejected)
        .values(verification_score=result.overall_score, verification_details=report, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if rejected.rowcount == 1:
        await session.commit()
        return VerificationStatus.Rejected

    await session.execute(
        update(Achievement)
        .where(Achievement.id == achievement_id)
        .where(Achievement.verification_status == VerificationStatus.Approved)
        .values(verification_details=report, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return VerificationStatus.Approved


async def score_achievement(session: AsyncSession, achievement_id) -> ScoreResult:
    """
    Runs the scoring engine on one achievement and persists the outcome.

    Decided achievements keep their status, including a decision made while
    the engine was still working. An approved achievement also keeps the
    score its points were granted on; only the match report is refreshed.
    """
    achievement = await get_achievement(session, achievement_id)

    result = await request_score(achievement.id)
    if result.verification_status not in SCORED_STATUSES:
        raise CollaboratorError(
            f"Scoring service returned status {result.verification_status.value}; "
            f"expected one of {', '.join(s.value for s in SCORED_STATUSES)}"
        )

    kept = await _write_score(session, achievement.id, result)
    await session.refresh(achievement)

    if kept is not None:
        logger.info(
            f"Achievement {achievement.id} is {kept.value}; "
            f"re-score recorded without changing status"
        )
    logger.info(
        f"Achievement {achievement.id} scored {result.overall_score}% "
        f"({result.verification_status.value})"
    )
    return result


async def bulk_score(
    session: AsyncSession,
    achievement_ids: Optional[Iterable[UUID]] = None,
) -> BulkResult:
    """
    Scores every PENDING achievement (optionally limited to the given ids),
    one at a time. A failing item is counted in `errors` and the batch
    carries on.
    """
    query = select(Achievement.id).where(Achievement.verification_status == VerificationStatus.Pending)
    if achievement_ids is not None:
        query = query.where(Achievement.id.in_(list(achievement_ids)))

    pending_ids = list((await session.execute(query.order_by(Achievement.created_at))).scalars().all())
    tally = BulkResult(total=len(pending_ids))

    for achievement_id in pending_ids:
        try:
            result = await score_achievement(session, achievement_id)
        except (PortalError, SQLAlchemyError) as e:
            await session.rollback()
            tally.errors += 1
            logger.warning(f"Bulk scoring: achievement {achievement_id} failed: {e}")
            continue

        if result.verification_status == VerificationStatus.Verified:
            tally.verified += 1
        elif result.verification_status == VerificationStatus.Partial:
            tally.partial += 1
        else:
            tally.failed += 1

    logger.info(
        f"Bulk scoring done: {tally.total} total, {tally.verified} verified, "
        f"{tally.partial} partial, {tally.failed} failed, {tally.errors} errors"
    )
    return tally


# ===================================================================
# ADMIN DECISION
# ===================================================================
def _check_preconditions(achievement: Achievement, decision: Decision, threshold: int):
    if achievement.verification_status in TERMINAL_STATUSES:
        raise AlreadyDecidedError(achievement.id, achievement.verification_status.value)
    if decision == Decision.Approved:
        score = achievement.verification_score
        if score is None or score < threshold:
            raise ScoreTooLowError(score, threshold)


async def _claim_decision(
    session: AsyncSession,
    achievement: Achievement,
    decision: Decision,
    notes: Optional[str],
    decided_by: Optional[UUID],
    threshold: int,
) -> bool:
    """
    Conditional write keyed on the current status (and score for approvals).
    Returns False when another decision got there first or the score moved.
    """
    now = datetime.now(timezone.utc)
    approved = decision == Decision.Approved

    stmt = (
        update(Achievement)
        .where(Achievement.id == achievement.id)
        .where(Achievement.verification_status.notin_(TERMINAL_STATUSES))
    )
    if approved:
        stmt = stmt.where(Achievement.verification_score.is_not(None)).where(
            Achievement.verification_score >= threshold
        )

    stmt = stmt.values(
        verification_status=VerificationStatus(decision.value),
        awarded_points=achievement.base_points if approved else 0,
        admin_notes=notes,
        decided_by=decided_by,
        decided_at=now,
        updated_at=now,
    ).execution_options(synchronize_session=False)

    result = await session.execute(stmt)
    if result.rowcount != 1:
        await session.rollback()
        return False

    await session.commit()
    return True


async def decide(
    session: AsyncSession,
    achievement_id,
    decision,
    notes: Optional[str] = None,
    decided_by: Optional[UUID] = None,
) -> DecisionResult:
    try:
        decision = Decision(decision)
    except ValueError:
        raise ValidationError(f"Decision must be APPROVED or REJECTED, got '{decision}'")

    threshold = settings.APPROVAL_SCORE_THRESHOLD
    achievement = await get_achievement(session, achievement_id)
    _check_preconditions(achievement, decision, threshold)

    if not await _claim_decision(session, achievement, decision, notes, decided_by, threshold):
        # Lost a race: report the state that beat us
        await session.refresh(achievement)
        _check_preconditions(achievement, decision, threshold)
        raise AlreadyDecidedError(achievement.id, achievement.verification_status.value)

    await session.refresh(achievement)
    points = achievement.awarded_points
    logger.info(
        f"Achievement {achievement.id} {decision.value} by {decided_by or 'admin'}"
        f" ({points} points awarded)"
    )

    email_sent = await _notify_student(session, achievement, decision, notes, points)

    if decision == Decision.Approved:
        message = f"Achievement approved. {points} points awarded."
    else:
        message = "Achievement rejected. No points awarded."

    return DecisionResult(points_awarded=points, email_sent=email_sent, message=message)


async def _notify_student(
    session: AsyncSession,
    achievement: Achievement,
    decision: Decision,
    notes: Optional[str],
    points: int,
) -> bool:
    """Email failures are recorded on the achievement, never raised."""
    student = await session.get(Student, achievement.student_id)

    try:
        email_sent = await run_in_threadpool(
            send_decision_email,
            student.email if student else None,
            decision,
            notes,
            student.full_name if student else None,
            details_of(achievement).display_name(),
            points,
        )
    except Exception:
        logger.exception(f"Decision email for achievement {achievement.id} failed")
        email_sent = False

    if email_sent:
        achievement.email_sent = True
        achievement.email_sent_at = datetime.now(timezone.utc)
        session.add(achievement)
        await session.commit()

    return email_sent
