"""
Security utilities for the Plant Health application.
Verifies Supabase-issued JWT access tokens and extracts the owner identity.
"""

import logging
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from plant_health.shared.config.settings import Settings
from plant_health.shared.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenData(BaseModel):
    """Token payload data structure"""
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None
    payload: Dict[str, Any] = {}


def verify_access_token(token: str, settings: Settings) -> TokenData:
    """
    Verify and decode a Supabase access token.

    The signature is checked against ``SUPABASE_JWT_SECRET``; the audience must
    match ``JWT_AUDIENCE`` and the token must not be expired. The ``sub`` claim
    is the owner id used to scope every plant query.

    Args:
        token: Raw JWT from the Authorization header
        settings: Application settings

    Returns:
        TokenData: Decoded identity

    Raises:
        AuthenticationError: If token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.warning("Token has expired")
        raise AuthenticationError("Token expired") from e
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError("Could not validate credentials") from e

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token missing subject (user_id)")
        raise AuthenticationError("Could not validate credentials")

    return TokenData(
        user_id=user_id,
        email=payload.get("email"),
        role=payload.get("role"),
        payload=payload,
    )
