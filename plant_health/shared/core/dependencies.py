# 📄 File: plant_health/shared/core/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Shared helpers that hand each API endpoint what it needs, most importantly "who is asking",
# so every plant lookup only ever sees that person's plants.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency functions for the authenticated owner (read from request.state, which
# AuthenticationMiddleware fills) and for application-scoped objects kept on app.state.
# 🔗 Dependencies:
# FastAPI, plant_health.shared.core.exceptions, plant_health.shared.core.event_bus
# 🔄 Connected Modules / Calls From:
# plant_diagnosis presentation layer (routers and dependency wiring)

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Request

from plant_health.shared.core.event_bus import EventBus
from plant_health.shared.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class CurrentUser:
    """User information extracted from the verified access token."""

    def __init__(
        self,
        user_id: UUID,
        email: Optional[str] = None,
        role: Optional[str] = None,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.token_payload = token_payload or {}

    def __repr__(self) -> str:
        return f"CurrentUser(user_id={self.user_id})"


async def get_current_user(request: Request) -> CurrentUser:
    """
    Get current authenticated user from request state.
    This dependency assumes AuthenticationMiddleware has already validated the token.

    Args:
        request: FastAPI request object

    Returns:
        CurrentUser: Current user information

    Raises:
        AuthenticationError: If user is not authenticated or the subject is not a UUID
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        logger.warning("User ID not found in request state")
        raise AuthenticationError("User not authenticated")

    try:
        owner_id = UUID(str(user_id))
    except ValueError as e:
        raise AuthenticationError("Token subject is not a valid user id") from e

    return CurrentUser(
        user_id=owner_id,
        email=getattr(request.state, "user_email", None),
        role=getattr(request.state, "user_role", None),
        token_payload=getattr(request.state, "token_payload", {}),
    )


def get_event_bus(request: Request) -> EventBus:
    """Application event bus created by ``create_application``."""
    return request.app.state.event_bus
