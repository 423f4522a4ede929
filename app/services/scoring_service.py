# app/services/scoring_service.py
import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import CollaboratorError
from app.schemas.achievement import ScoreResult


async def request_score(achievement_id) -> ScoreResult:
    """
    Asks the OCR/matching engine to score one achievement's certificate
    against its form fields. The engine owns the VERIFIED/PARTIAL/FAILED
    thresholds; we only persist what it returns.
    """
    url = f"{settings.SCORING_SERVICE_URL.rstrip('/')}/score/{achievement_id}"

    async with httpx.AsyncClient(timeout=settings.SCORING_TIMEOUT_SECONDS) as client:
        try:
            response = await client.post(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Scoring service returned {e.response.status_code} for {achievement_id}")
            raise CollaboratorError(
                f"Scoring service failed for {achievement_id}: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Scoring service unreachable for {achievement_id}: {e}")
            raise CollaboratorError(f"Scoring service unavailable: {e}") from e

    try:
        return ScoreResult.model_validate(payload)
    except PydanticValidationError as e:
        raise CollaboratorError(f"Scoring service returned a malformed result: {e}") from e
