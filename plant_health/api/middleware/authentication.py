# 📄 File: plant_health/api/middleware/authentication.py
# 🧭 Purpose (Layman Explanation):
# A security guard that checks every visitor's ID card (their login token) before letting them
# reach their plants, and remembers who they are for the rest of the request.
# 🧪 Purpose (Technical Summary):
# Authentication middleware that verifies Supabase JWT bearer tokens (HS256, audience
# "authenticated"), injects the owner identity into request.state and rejects protected
# requests with a structured 401.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, python-jose (through plant_health.shared.core.security),
# plant_health.shared.config.settings, plant_health.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# plant_health.main (middleware registration), plant_health.shared.core.dependencies.get_current_user

import logging
from typing import List, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from plant_health.shared.config.settings import Settings, get_settings
from plant_health.shared.core.exceptions import AuthenticationError
from plant_health.shared.core.security import verify_access_token
from plant_health.shared.utils.logging import user_id_var

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_PATHS = [
    "/",
    "/health",
    "/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
]


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Authentication middleware for JWT token validation

    This middleware:
    - Reads the Bearer token from the Authorization header
    - Verifies signature, expiry and audience
    - Stores user_id, email, role and the raw claims on request.state
    - Returns 401 for protected paths without a valid token
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Optional[Settings] = None,
        public_paths: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.public_paths = public_paths or list(DEFAULT_PUBLIC_PATHS)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS" or self._is_public_path(request.url.path):
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            return self._create_authentication_error(AuthenticationError("No authentication token provided"))

        try:
            token_data = verify_access_token(token, self.settings)
        except AuthenticationError as e:
            return self._create_authentication_error(e)

        request.state.user_id = token_data.user_id
        request.state.user_email = token_data.email
        request.state.user_role = token_data.role
        request.state.token_payload = token_data.payload

        context_token = user_id_var.set(token_data.user_id)
        try:
            return await call_next(request)
        finally:
            user_id_var.reset(context_token)

    def _extract_token(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None

        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    def _is_public_path(self, path: str) -> bool:
        """
        Check if path is public (doesn't require authentication)

        Args:
            path: Request path

        Returns:
            True if path is public
        """
        if path in self.public_paths:
            return True

        return any(
            path.startswith(public_path.rstrip("/") + "/")
            for public_path in self.public_paths
            if public_path != "/"
        )

    def _create_authentication_error(self, error: AuthenticationError) -> JSONResponse:
        logger.info(f"Authentication rejected: {error.message}")
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(),
            headers={"WWW-Authenticate": "Bearer"},
        )
