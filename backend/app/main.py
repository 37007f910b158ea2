"""
FastAPI application for the ingestion service.

Routes:
    /health, /health/ready     process liveness and database readiness
    /api/v1/ingestion/...      ingestion RPCs and the service HealthCheck
"""

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from ingestion.db import db
from ingestion.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .config import get_settings
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import ingestion as ingestion_router

API_VERSION = "v1"

settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")


def _register_probes(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    def liveness():
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness():
        """200 when the database answers SELECT 1, 503 otherwise."""
        database = db.health_check()
        checks = {"database": database["healthy"]}
        if not database["healthy"]:
            logger.warning("readiness_check_failed", error=database["error"])
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks, "latency_ms": database["latency_ms"]}


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=API_VERSION, debug=settings.debug)

    # Added last runs first: the request id is bound before request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        db.initialize(settings.database_url)
        db.create_all_tables()
        logger.info(
            "app_startup",
            app_name=settings.app_name,
            parallel_ingest_all=settings.ingest_all_parallel,
            processing_trigger=settings.processing_trigger_enabled,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")

    _register_probes(app)
    app.include_router(ingestion_router.router, prefix=f"{settings.api_prefix}/{API_VERSION}")

    return app


app = create_app()
