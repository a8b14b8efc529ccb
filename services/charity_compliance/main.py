"""
Charity Compliance Service - Main Application
=============================================

FastAPI application for compliance statistics and Annual Return reporting.

Version: 0.1.0
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.charity_compliance.exceptions import ComplianceReportingError
from services.charity_compliance.routes import annual_return, compliance
from shared.config import settings
from shared.database.postgres import PostgresClient
from shared.database.redis import RedisClient
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import HealthResponse

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="charity-compliance",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "charity_compliance_starting",
        environment=settings.environment.value,
        port=settings.ports.compliance_reporting,
    )

    # Startup
    try:
        PostgresClient.get_engine()
        logger.info("postgres_connected")

        RedisClient.get_client()
        logger.info("redis_connected")
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("charity_compliance_shutting_down")
    await PostgresClient.close()
    await RedisClient.close()


# Create FastAPI application
app = FastAPI(
    title="Charity Prep Compliance Service",
    description="Compliance scoring, trends and Annual Return reporting",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Bind a request id and path to every log line of the request."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its data stores.
    """
    components: dict[str, dict[str, Any]] = {
        "postgres": await PostgresClient.health_check(),
        "redis": await RedisClient.health_check(),
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="charity-compliance",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Charity Prep Compliance Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    compliance.router,
    prefix="/api/v1/compliance",
    tags=["Compliance"],
)

app.include_router(
    annual_return.router,
    prefix="/api/v1/annual-return",
    tags=["Annual Return"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ComplianceReportingError)
async def compliance_exception_handler(
    request: Request, exc: ComplianceReportingError
) -> JSONResponse:
    """Handle domain errors."""
    logger.warning(
        "compliance_error",
        status_code=exc.status_code,
        error=exc.message,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message,
            "status_code": exc.status_code,
            "details": exc.details,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.charity_compliance.main:app",
        host="0.0.0.0",
        port=settings.ports.compliance_reporting,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
