"""Ward Handover - nursing handover and Hospital at Night records.

Main FastAPI application entry point.
"""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, make_asgi_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ward_handover.api.v1.deps import get_kv_store, open_storage
from ward_handover.api.v1.router import api_router
from ward_handover.core.config import settings
from ward_handover.core.logging import get_logger, setup_logging
from ward_handover.services.storage import StorageError

# Initialize logging
setup_logging(
    log_level="DEBUG" if settings.debug else "INFO",
    json_logs=settings.environment == "production",
)

logger = get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "ward_handover_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "ward_handover_request_latency_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)


def _safe_request_path(request: Request) -> str:
    """Return a route template path to avoid logging patient ids in URLs."""
    route = request.scope.get("route")
    if route and hasattr(route, "path"):
        return route.path
    return request.url.path


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Prepare the configured backend, optionally seed demo data, release on exit."""
    logger.info(
        "Starting Ward Handover",
        version=settings.app_version,
        environment=settings.environment,
        storage_backend=settings.storage.backend,
    )

    if settings.storage.backend == "local":
        app.state.kv_store = get_kv_store()
        await app.state.kv_store.initialize()
    else:
        from ward_handover.models.base import async_session_maker, engine, init_models

        await init_models(engine)
        app.state.db_engine = engine
        app.state.db_session_maker = async_session_maker
        logger.info("Database tables ready", url=settings.database.url)

    if settings.enable_demo_data:
        from ward_handover.services.demo_data import seed_demo_data

        try:
            async with open_storage() as storage:
                inserted = await seed_demo_data(storage)
            logger.warning("Demo data enabled", patients_seeded=inserted)
        except (StorageError, SQLAlchemyError) as e:
            logger.warning("Could not seed demo data", error=str(e))

    yield

    logger.info("Shutting down Ward Handover")
    if hasattr(app.state, "db_engine"):
        await app.state.db_engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Patients on the ward, SBAR handover notes written at each shift, "
            "Hospital at Night review requests, and the ward boards and "
            "dashboards built from them."
        ),
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Time each request and bind its id to every log line it produces."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        route_path = _safe_request_path(request)
        REQUEST_COUNT.labels(request.method, route_path, response.status_code).inc()
        REQUEST_LATENCY.labels(request.method, route_path).observe(elapsed)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            "request_completed",
            method=request.method,
            path=route_path,
            status_code=response.status_code,
            process_time=f"{elapsed:.4f}s",
        )
        return response

    app.mount("/metrics", make_asgi_app())
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness check."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "storage": settings.storage.backend,
        }

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """Readiness check: the configured backend can be reached."""
        checks = {"storage": False}

        if hasattr(request.app.state, "db_session_maker"):
            try:
                async with request.app.state.db_session_maker() as session:
                    await session.execute(text("SELECT 1"))
                checks["storage"] = True
            except SQLAlchemyError as e:
                logger.warning("readiness_check_failed", backend="sql", error=str(e))
        elif hasattr(request.app.state, "kv_store"):
            checks["storage"] = request.app.state.kv_store.is_ready()

        ready = all(checks.values())
        return JSONResponse(
            status_code=200 if ready else 503,
            content={"ready": ready, "backend": settings.storage.backend, "checks": checks},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        """Either backend failing to read or write answers like any other 500."""
        logger.error(
            "storage_error",
            path=_safe_request_path(request),
            method=request.method,
            backend=settings.storage.backend,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.debug else "An unexpected error occurred",
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Anything else is a 500 with the detail hidden outside debug mode."""
        logger.error(
            "unhandled_exception",
            path=_safe_request_path(request),
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.debug else "An unexpected error occurred",
            },
        )

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ward_handover.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level="debug" if settings.debug else "info",
    )
