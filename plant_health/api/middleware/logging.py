# 📄 File: plant_health/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request to the app: what was asked, how long the answer took and
# whether something went wrong, with a tracking number to follow one request through the logs.
# 🧪 Purpose (Technical Summary):
# Request logging middleware with X-Request-ID propagation, contextvar-bound request/user
# context, timing, slow-request warnings and sensitive-header filtering.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, plant_health.shared.utils.logging, plant_health.shared.config.settings
# 🔄 Connected Modules / Calls From:
# plant_health.main (middleware registration), all API endpoints

import time
import uuid
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from plant_health.shared.config.settings import Settings, get_settings
from plant_health.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware for API monitoring

    Features:
    - Request ID generation or propagation
    - Request/response timing
    - Slow request warnings
    - Authorization and cookie headers are never logged
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.slow_request_threshold = self.settings.SLOW_REQUEST_THRESHOLD
        self.excluded_paths = {"/health", "/health/ready"}

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        with log_context(request_id=request_id):
            logger.info(
                f"{request.method} {request.url.path}",
                extra={
                    "event_type": "http_request",
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent", ""),
                },
            )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} failed: {e}",
                    extra={"event_type": "http_error", "duration_ms": self._elapsed_ms(start_time)},
                    exc_info=True,
                )
                raise

            duration_ms = self._elapsed_ms(start_time)
            response_data = {
                "event_type": "http_response",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }

            if duration_ms / 1000 >= self.slow_request_threshold:
                logger.warning(f"Slow request: {request.method} {request.url.path}", extra=response_data)
            else:
                logger.info(
                    f"{request.method} {request.url.path} - {response.status_code} - {duration_ms}ms",
                    extra=response_data,
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)
