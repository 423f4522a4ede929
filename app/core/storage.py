# app/core/storage.py

from typing import Optional

from loguru import logger
from supabase import create_client, Client

from app.core.config import settings

# Init Client (Graceful Failure)
try:
    supabase: Optional[Client] = (
        create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        if settings.SUPABASE_URL and settings.SUPABASE_KEY
        else None
    )
except Exception as e:
    logger.warning(f"Supabase init failed, certificate links fall back to API_BASE_URL: {e}")
    supabase = None


def get_signed_url(file_path: str, expiration=3600) -> Optional[str]:
    """
    Generates a temporary public link for a private certificate/marksheet.
    Valid for 1 hour by default.
    """
    if not file_path or not supabase:
        return None

    try:
        response = supabase.storage.from_(settings.CERTIFICATE_BUCKET).create_signed_url(file_path, expiration)

        # Handle different Supabase Python SDK response versions
        if isinstance(response, dict):
            return response.get("signedURL") or response.get("signedUrl")
        if hasattr(response, "signedURL"):
            return response.signedURL

        return str(response)

    except Exception as e:
        logger.warning(f"Failed to sign URL for {file_path}: {e}")
        return None


def resolve_file_url(file_path: Optional[str]) -> Optional[str]:
    """
    Turns a stored file reference into a retrievable URL.
    Absolute URLs pass through; otherwise the file store signs it, or the
    reference is served from the API host.
    """
    if not file_path:
        return None

    if file_path.startswith(("http://", "https://")):
        return file_path

    signed = get_signed_url(file_path)
    if signed:
        return signed

    return f"{settings.API_BASE_URL.rstrip('/')}/{file_path.lstrip('/')}"
