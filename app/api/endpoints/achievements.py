# app/api/endpoints/achievements.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_student, get_current_user, get_db_session, require_admin
from app.core.exceptions import PortalError, to_http
from app.models.student import Student
from app.models.user import User
from app.schemas.achievement import AchievementCreate, AchievementRead, NotesUpdate
from app.services.achievement_service import (
    create_achievement,
    delete_achievement,
    list_student_achievements,
    update_admin_notes,
)

router = APIRouter(
    prefix="/api/achievements",
    tags=["Achievements"]
)


# ------------------------------------------------------------
# SUBMIT ACHIEVEMENT (student)
# ------------------------------------------------------------
@router.post("", response_model=AchievementRead, status_code=status.HTTP_201_CREATED)
async def submit_achievement(
    data: AchievementCreate,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await create_achievement(session, student.id, data)
    except PortalError as e:
        raise to_http(e)


# ------------------------------------------------------------
# MY ACHIEVEMENTS
# ------------------------------------------------------------
@router.get("/my", response_model=List[AchievementRead])
async def my_achievements(
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_student_achievements(session, student.id)


# ------------------------------------------------------------
# DELETE (owner while not approved, or admin)
# ------------------------------------------------------------
@router.delete("/{achievement_id}")
async def remove_achievement(
    achievement_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await delete_achievement(session, achievement_id, current_user)
    except PortalError as e:
        raise to_http(e)

    return {"message": "Achievement deleted"}


# ------------------------------------------------------------
# ADMIN NOTES (editable after a decision)
# ------------------------------------------------------------
@router.patch("/{achievement_id}/notes", response_model=AchievementRead)
async def edit_notes(
    achievement_id: str,
    data: NotesUpdate,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await update_admin_notes(session, achievement_id, data.admin_notes)
    except PortalError as e:
        raise to_http(e)
