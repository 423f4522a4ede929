# app/api/deps.py

import uuid
from typing import AsyncGenerator

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token
from app.core.database import get_session
from app.models.student import Student
from app.models.user import User, UserRole


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=True)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Get current logged-in user from JWT
# ------------------------------------------------------------
async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:

    token = credentials.credentials

    try:
        payload = decode_token(token)
        user_id = payload.get("sub")

        if not user_id:
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token payload")

        user_uuid = uuid.UUID(str(user_id))

    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    user = await session.get(User, user_uuid)

    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")

    return user


# ------------------------------------------------------------
# Role-based access control
# ------------------------------------------------------------
def role_required(*allowed_roles: UserRole):
    """
    Enforces that the current user has one of the allowed roles.
    """
    allowed = {UserRole(r).value for r in allowed_roles}

    async def checker(current_user: User = Depends(get_current_user)):
        role = current_user.role.value if isinstance(current_user.role, UserRole) else str(current_user.role)

        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{role}'"
            )

        return current_user

    return checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_admin = role_required(UserRole.Admin)
require_student = role_required(UserRole.Student)


async def get_current_student(
    current_user: User = Depends(require_student),
    session: AsyncSession = Depends(get_db_session),
) -> Student:
    """Student profile behind the calling account."""
    if not current_user.student_id:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Student profile not created yet")

    student = await session.get(Student, current_user.student_id)
    if not student:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Student profile not found")

    return student
