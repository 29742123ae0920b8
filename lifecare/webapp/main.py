"""
FastAPI application entry point for the Life Care booking API.

Run with:
    uvicorn lifecare.webapp.main:app --reload

Open: http://127.0.0.1:5001/docs
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lifecare.pricing.exceptions import PricingError
from lifecare.services.health_service import HealthService
from lifecare.utils.config_loader import AppConfig, load_config, load_env
from lifecare.utils.logging_config import setup_logging
from lifecare.webapp.exceptions import AppException
from lifecare.webapp.helpers import format_validation_errors
from lifecare.webapp.middleware import RateLimitConfig, RateLimitMiddleware
from lifecare.webapp.routes import build_registry, router

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration; loaded from YAML/env when None.
        configure_logging: Whether startup reconfigures the root logger.

    Returns:
        FastAPI: Configured application.
    """
    if config is None:
        load_env()
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        if configure_logging:
            setup_logging(
                level=config.logging.level,
                log_format=config.logging.format,
                log_file=config.logging.file,
            )
        logger.info("Life Care booking API starting...")
        yield
        logger.info("Life Care booking API shutting down...")

    app = FastAPI(
        title="Life Care Home Nursing API",
        description="Booking, pricing, contact and review API for a home-nursing service",
        version=HealthService.VERSION,
        debug=config.server.debug,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = build_registry(config)

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(PricingError)
    async def pricing_exception_handler(request: Request, exc: PricingError):
        logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": exc.error_code,
                "message": exc.message,
                "details": {"value": str(exc.value)},
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.warning(f"Validation error for {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "VALIDATION_ERROR",
                "message": errors[0]["message"] if errors else "Invalid request",
                "details": {"errors": errors},
            },
        )

    @app.middleware("http")
    async def error_handling_middleware(request: Request, call_next):
        """Global error handling middleware."""
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.exception(f"Unhandled error processing {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "INTERNAL_ERROR",
                    "message": str(e) if app.debug else "An unexpected error occurred",
                    "path": str(request.url.path),
                },
                headers={"X-Process-Time": str(process_time)},
            )

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Detailed health check endpoint for monitoring."""
        registry = app.state.registry
        report = HealthService(config, registry.engine, registry.stores.values()).get_full_health()
        return report.to_dict()

    @app.get("/health/simple")
    async def simple_health_check() -> dict[str, Any]:
        """Simple health check for load balancers."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health/ready")
    async def readiness_check() -> dict[str, Any]:
        """Readiness check - verifies app can serve requests."""
        return {
            "status": "ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/health")
    async def api_health() -> dict[str, Any]:
        return {"status": "ok", "message": "Server is running"}

    rate_limit_config = RateLimitConfig(
        enabled=config.rate_limit.enabled,
        default_rpm=config.rate_limit.default_rpm,
        booking_rpm=config.rate_limit.booking_rpm,
        api_rpm=config.rate_limit.api_rpm,
    )
    app.add_middleware(RateLimitMiddleware, config=rate_limit_config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lifecare.webapp.main:app", host="127.0.0.1", port=5001, reload=True)
