# 📄 File: plant_health/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the Plant Health app, connects the database, photo
# storage and AI plant doctor, and makes sure everything is ready to handle requests.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: lifespan-managed resources kept on app.state
# (engine, session manager, Supabase storage client, diagnosis API client), the in-process
# event bus with audit subscribers, middleware stack, router registration and exception
# handlers rendering the structured error envelope.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - plant_health.shared.config (settings, Supabase client)
# - plant_health.shared.infrastructure (database, storage, external APIs)
# - plant_health.api (routers, health, middleware)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup (plant_health.main:app)
# - tests (create_application with dependency overrides)

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plant_health.api.middleware.authentication import AuthenticationMiddleware
from plant_health.api.middleware.logging import RequestLoggingMiddleware
from plant_health.api.v1.health import health_router
from plant_health.api.v1.router import api_v1_router
from plant_health.modules.plant_diagnosis.domain.events.handlers import audit_handlers
from plant_health.modules.plant_diagnosis.infrastructure.external.oracle_factory import (
    create_diagnosis_api_client,
)
from plant_health.shared.config.settings import get_settings
from plant_health.shared.config.supabase import create_supabase_client
from plant_health.shared.core.event_bus import EventBus
from plant_health.shared.core.exceptions import PlantHealthException
from plant_health.shared.infrastructure.database.connection import DatabaseConnectionManager
from plant_health.shared.infrastructure.database.session import DatabaseSessionManager
from plant_health.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient
from plant_health.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Builds every long-lived resource once, stores it on ``app.state`` and
    releases it on shutdown.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    log_startup_event(settings.APP_NAME, settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})

    db_manager = DatabaseConnectionManager(settings)
    await db_manager.initialize()
    app.state.db_manager = db_manager
    app.state.session_manager = DatabaseSessionManager(db_manager.engine)
    logger.info("✅ Session manager initialized")

    app.state.supabase = create_supabase_client(settings)
    app.state.storage_client = SupabaseStorageClient(
        app.state.supabase,
        bucket_name=settings.SUPABASE_STORAGE_BUCKET,
        max_file_size=settings.MAX_IMAGE_SIZE,
        allowed_formats=settings.allowed_image_formats,
    )
    logger.info("✅ Storage client initialized")

    diagnosis_api_client = create_diagnosis_api_client(settings)
    if diagnosis_api_client is not None:
        await diagnosis_api_client.initialize()
    app.state.diagnosis_api_client = diagnosis_api_client
    logger.info(f"✅ Diagnosis provider: {settings.DIAGNOSIS_PROVIDER}")

    try:
        yield
    finally:
        if diagnosis_api_client is not None:
            await diagnosis_api_client.close()
        await db_manager.close()
        log_shutdown_event(settings.APP_NAME, extra={"events": app.state.event_bus.get_stats()})


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with middleware, routers,
    exception handlers and the event bus.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # EVENT BUS
    # =========================================================================

    event_bus = EventBus()
    for handler in audit_handlers():
        event_bus.subscribe(handler)
    app.state.event_bus = event_bus

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Added innermost first: CORS -> request logging -> authentication -> routes
    app.add_middleware(AuthenticationMiddleware, settings=settings)
    app.add_middleware(RequestLoggingMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(health_router)
    app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "health": "/health"}

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(PlantHealthException)
    async def plant_health_exception_handler(request: Request, exc: PlantHealthException) -> JSONResponse:
        """Handle application exceptions with the structured error envelope."""
        if exc.status_code >= 500:
            logger.error(
                f"{exc.error_code}: {exc.message}",
                extra={"path": request.url.path, "details": exc.details},
            )
        else:
            logger.info(f"{exc.error_code}: {exc.message}", extra={"path": request.url.path})

        body = exc.to_dict()
        body["error"]["request_id"] = getattr(request.state, "request_id", None)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Render request validation failures as VALIDATION_ERROR."""
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": str(error.get("ctx", {}).get("error", error.get("msg"))),
            }
            for error in exc.errors()
        ]
        message = errors[0]["message"] if len(errors) == 1 else "Request validation failed"
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": message,
                    "details": {"errors": errors},
                    "status_code": 422,
                    "request_id": getattr(request.state, "request_id", None),
                }
            },
        )

    @app.exception_handler(Exception)
    async def internal_server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle 500 Internal Server Error."""
        logger.error(f"Internal server error: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An internal server error occurred",
                    "details": {"error_type": type(exc).__name__} if settings.DEBUG else {},
                    "status_code": 500,
                    "request_id": getattr(request.state, "request_id", None),
                }
            },
        )

    return app


app = create_application()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "plant_health.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.ENVIRONMENT == "development",
        log_level=_settings.LOG_LEVEL.lower(),
    )
