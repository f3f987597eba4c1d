"""Authentication gate.

Exposes a single dependency `get_current_user` for protected routes that
validates the JWT passed via the Authorization header (Bearer)."""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modelchat.config import Settings, get_settings
from modelchat.errors import InvalidCredential, Unauthenticated
from modelchat.services.security import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Validate the incoming bearer token and return a lightweight user dict."""
    if not credentials or not credentials.credentials:
        raise Unauthenticated()

    result = verify_access_token(credentials.credentials, settings)
    if not result.ok:
        logger.warning("Token verification failed: %s", result.error)
        raise InvalidCredential()

    return {"user_id": result.user_id}
