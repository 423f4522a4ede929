# app/core/exceptions.py

from fastapi import HTTPException, status


class PortalError(Exception):
    """Base class for refusals raised by the service layer."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Bad input caught before any external call (fields, year range, category)."""


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN


class ScoreTooLowError(PortalError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, score, threshold: int):
        shown = score if score is not None else 0
        super().__init__(
            f"Cannot approve: verification score ({shown}%) is below {threshold}%. "
            f"Score must be >= {threshold}% to award points."
        )
        self.score = score
        self.threshold = threshold


class AlreadyDecidedError(PortalError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, achievement_id, current_status):
        super().__init__(
            f"Achievement {achievement_id} is already {current_status}; decisions are final."
        )
        self.current_status = current_status


class CollaboratorError(PortalError):
    """Scoring, persistence or notification collaborator failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


def to_http(exc: PortalError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
