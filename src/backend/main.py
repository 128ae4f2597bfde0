"""
Proposals Backend Application

Users submit proposals, rank them in a personal ordered list and read
the latest published standard.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.v1 import router as api_v1_router
from core.config import Settings, get_settings
from core.events import create_start_app_handler, create_stop_app_handler
from core.exceptions import ProposalsError, Unauthenticated
from core.logging import configure_logging
from core.middleware import SecurityHeadersMiddleware
from db.session import Database
from services.identity import build_verifier

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    await create_start_app_handler(app)()
    yield
    # Shutdown
    await create_stop_app_handler(app)()


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    application = FastAPI(
        title=settings.APP_NAME,
        description="Proposal submission and ranked voting",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Process-wide collaborators, handed to request handlers through api.deps
    application.state.settings = settings
    application.state.database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    application.state.verifier = build_verifier(settings)

    # Add middleware (order matters - processed in reverse)
    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    application.include_router(api_v1_router, prefix="/api/v1")

    @application.exception_handler(ProposalsError)
    async def proposals_error_handler(request: Request, exc: ProposalsError) -> JSONResponse:
        """Turn expected domain failures into typed JSON errors."""
        logger.info(
            "request_failed",
            error_type=exc.error_type,
            detail=exc.detail,
            path=request.url.path,
            method=request.method,
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_type": exc.error_type},
            headers=headers,
        )

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch unhandled exceptions, database connectivity failures included.

        The request fails with a 500; the process keeps serving.
        """
        logger.exception(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An internal server error occurred. Please try again later.",
                "error_type": type(exc).__name__ if settings.DEBUG else "InternalServerError",
            },
        )

    @application.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "service": "proposals-api"}

    @application.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": "1.0.0",
            "auth_strategy": settings.AUTH_STRATEGY.value,
            "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
        }

    return application


app = create_application()
