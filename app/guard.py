# app/guard.py
import secrets
from typing import Optional

from fastapi import Request

from .errors import Result, UnauthorizedError


def check_credential(credential: Optional[str], secret: Optional[str]) -> Result:
    """Authorized only when a credential is supplied and equals the configured secret."""
    if not credential or not secret:
        return Result.failure(UnauthorizedError("Unauthorized"))
    if not secrets.compare_digest(credential.encode("utf-8"), secret.encode("utf-8")):
        return Result.failure(UnauthorizedError("Unauthorized"))
    return Result.success()


def authorize(request: Request) -> Result:
    # FastAPI dependency; returns the decision instead of raising
    settings = request.app.state.settings
    return check_credential(request.headers.get(settings.api_key_header), settings.api_key)
