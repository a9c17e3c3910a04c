"""
FastAPI Application

HTTP API server for job applications.
"""

import os
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.api import applications as applications_api
from app.config import Config, get_config
from app.services.container import ServiceContainer, build_container
from app.utils.exceptions import PortalError
from app.utils.limiter import limiter, set_submit_rate_limit
from app.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _cors_origins(config: Optional[Config]) -> list:
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    if config and config.server.frontend_url:
        origins.append(config.server.frontend_url.rstrip("/"))
    # Extra origins from env (comma-separated)
    for o in os.getenv("CORS_ORIGINS", "").split(","):
        o = o.strip().rstrip("/")
        if o and o not in origins:
            origins.append(o)
    return origins


def create_app(
    config: Optional[Config] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        config: Configuration used to build the service container at startup
        container: Pre-built container (tests); its lifecycle stays with the caller
    """
    if container is not None:
        config = container.config

    app = FastAPI(
        title="Job Application API",
        description="API for submitting and managing job applications",
        version="1.0.0",
    )
    app.state.limiter = limiter
    app.state.container = container
    if config is not None:
        set_submit_rate_limit(config.server.submit_rate_limit)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(config),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    owns_container = container is None

    @app.on_event("startup")
    async def startup_services():
        """Build services once per process and ensure indexes exist."""
        if app.state.container is None:
            cfg = config or get_config()
            setup_logging(cfg)
            set_submit_rate_limit(cfg.server.submit_rate_limit)
            app.state.container = build_container(cfg)
        try:
            app.state.container.application_service.ensure_indexes()
            logger.info("[API] MongoDB indexes ensured")
        except Exception as e:
            logger.warning(f"[API] Index creation skipped or partial: {e}")

    @app.on_event("shutdown")
    async def shutdown_services():
        if owns_container and app.state.container is not None:
            app.state.container.close()
            app.state.container = None

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error(f"[API] {request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"[API] {request.method} {request.url.path} rejected ({exc.status_code}): {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"[API] Rate limit exceeded on {request.url.path}: {exc.detail}")
        response = JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"success": False, "message": "Too many requests, please try again later."},
        )
        return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"[API] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal Server Error"},
        )

    @app.get("/health")
    async def health():
        """Liveness probe: returns 200 if the process is running."""
        return {"status": "ok"}

    @app.get("/ready")
    async def ready():
        """Readiness probe: returns 200 if MongoDB is reachable."""
        try:
            app.state.container.database.client.admin.command("ping")
            return {"status": "ready"}
        except Exception as e:
            logger.warning(f"[API] Readiness check failed: {e}")
            raise HTTPException(status_code=503, detail="Service not ready")

    app.include_router(applications_api.router)
    return app
