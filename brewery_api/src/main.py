"""
FastAPI application entry point for the Brewery API.

This module provides the application factory with:
- Beer and customer CRUD routers
- Health, readiness and Prometheus metrics endpoints
- JWT bearer authentication for write requests
- Request logging with correlation IDs
- OpenTelemetry distributed tracing
- CORS and security headers
- Database pool, schema and sample data management
- Graceful startup and shutdown
"""

import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from brewery_api.src.bootstrap import load_seed_data
from brewery_api.src.config import Settings, get_settings
from brewery_api.src.database import check_database, create_db_pool, create_schema
from brewery_api.src.middleware import (
    AuthMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from brewery_api.src.repositories.beer_repo import BeerRepository
from brewery_api.src.repositories.customer_repo import CustomerRepository
from brewery_api.src.routers import beer, customer
from brewery_api.src.services.auth_service import TokenService
from shared.logging import configure_logging
from shared.metrics import get_api_metrics, get_metrics_handler
from shared.tracing import configure_tracing, shutdown_tracing

logger = structlog.get_logger(__name__)


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - Database connection pool initialization and ping
    - Schema creation and sample data
    - Graceful shutdown and resource cleanup
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    # ========================================================================
    # Startup: Initialize Resources
    # ========================================================================

    try:
        app.state.db_pool = await create_db_pool(settings)

        version = await check_database(app.state.db_pool)
        logger.info("database_connected", postgres_version=version)

        if settings.schema_auto_create:
            await create_schema(app.state.db_pool)

        if settings.seed_data_enabled:
            await load_seed_data(
                BeerRepository(app.state.db_pool),
                CustomerRepository(app.state.db_pool)
            )

        app.state.metrics.observe_pool(app.state.db_pool)

        logger.info(
            "application_started",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    # ========================================================================
    # Shutdown: Cleanup Resources
    # ========================================================================

    finally:
        logger.info("application_shutting_down")

        try:
            if app.state.db_pool is not None:
                await app.state.db_pool.close()
                app.state.db_pool = None
                logger.info("database_pool_closed")

            if app.state.tracer_provider is not None:
                logger.info("shutting_down_tracing")
                shutdown_tracing(app.state.tracer_provider)

            logger.info("application_shutdown_complete")

        except Exception as e:
            logger.error("application_shutdown_failed", error=str(e), exc_info=True)


# ============================================================================
# Exception Handlers
# ============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400 Bad Request."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the Brewery API application.

    Args:
        settings: Application settings (environment-derived when omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.app_name,
        environment=settings.environment
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="REST API for managing beers and customers of a brewery.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    metrics = get_api_metrics()
    token_service = TokenService(settings)

    app.state.settings = settings
    app.state.metrics = metrics
    app.state.db_pool = None
    app.state.tracer_provider = None

    # ========================================================================
    # Middleware Configuration (last added runs first)
    # ========================================================================

    app.add_middleware(
        AuthMiddleware,
        token_service=token_service,
        protect_reads=settings.security_protect_reads
    )

    if settings.security_headers_enabled:
        app.add_middleware(
            SecurityHeadersMiddleware,
            require_https=settings.security_require_https,
            hsts_max_age=settings.security_hsts_max_age
        )

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
            expose_headers=["Location", "X-Correlation-ID"],
        )

    app.add_middleware(RequestLoggingMiddleware, metrics=metrics)

    if settings.tracing_enabled:
        logger.info("initializing_tracing", endpoint=settings.tracing_otlp_endpoint)
        app.state.tracer_provider = configure_tracing(
            service_name=settings.app_name,
            otlp_endpoint=settings.tracing_otlp_endpoint,
            sampling_rate=settings.tracing_sample_rate,
            service_version=settings.app_version,
            app=app
        )

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # ========================================================================
    # Health and Readiness Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    async def health_check() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic health status without checking dependencies.
        Use for container health checks.
        """
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    @app.get("/ready", tags=["Health"], response_class=JSONResponse)
    async def readiness_check(request: Request) -> JSONResponse:
        """
        Readiness check endpoint.

        Pings the database; 503 until the pool is up and answering.
        """
        pool = request.app.state.db_pool
        checks = {"database": "unknown"}

        if pool is None:
            checks["database"] = "unavailable"
        else:
            try:
                await check_database(pool)
                checks["database"] = "healthy"
            except Exception as e:
                logger.error("database_health_check_failed", error=str(e))
                checks["database"] = "unhealthy"

            metrics.observe_pool(pool)

        all_healthy = all(value == "healthy" for value in checks.values())

        return JSONResponse(
            status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if all_healthy else "not_ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "checks": checks
            }
        )

    # ========================================================================
    # Metrics Endpoint
    # ========================================================================

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler()

        @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
        async def prometheus_metrics(request: Request) -> Response:
            """Prometheus metrics endpoint."""
            metrics.observe_pool(request.app.state.db_pool)
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    # ========================================================================
    # API Router Registration
    # ========================================================================

    app.include_router(beer.router, prefix=settings.api_prefix)
    app.include_router(customer.router, prefix=settings.api_prefix)

    return app


app = create_app()


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "brewery_api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
