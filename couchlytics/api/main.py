"""
FastAPI application factory and configuration.

This follows the application factory pattern, making testing easier
and allowing for different configurations (dev, test, prod).
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import config
from .routes.health import router as health_router
from .routes.trades import router as trades_router
from .middleware.cors import setup_cors

logging.basicConfig(level=logging.INFO,
                    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Couchlytics trade preview API...")
    logger.info(f"Backend API: {config.API_BASE_URL}")
    logger.info("Startup complete")

    yield

    logger.info("Shutdown complete")


def create_app(overrides: Optional[Dict[str, Any]] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures a FastAPI application instance. Settings come
    from couchlytics.config (environment) and can be overridden per app.
    """

    settings = {
        "title": "Couchlytics Trade Tools",
        "description": "Trade value previews for Madden franchise leagues",
        "version": config.VERSION,
        "debug": config.DEBUG,
        "cors_origins": config.CORS_ORIGINS,
    }

    if overrides:
        settings.update(overrides)

    app = FastAPI(
        title=settings["title"],
        description=settings["description"],
        version=settings["version"],
        debug=settings["debug"],
        lifespan=lifespan,
        docs_url="/docs" if settings["debug"] else None,  # Disable docs in prod
        redoc_url="/redoc" if settings["debug"] else None,
    )

    setup_cors(app, settings["cors_origins"])

    @app.middleware("http")
    async def time_and_log_requests(request: Request, call_next):
        """Log each request and expose its duration as X-Process-Time."""
        start_time = time.time()
        logger.info(f"Request: {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        logger.info(
            f"Response: {response.status_code} - {process_time:.3f}s - {request.method} {request.url.path}"
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "type": "http_error",
                    "message": exc.detail,
                    "status_code": exc.status_code,
                }
            }
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "type": "validation_error",
                    "message": "Request validation failed",
                    "details": jsonable_encoder(exc.errors()),
                }
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_error",
                    "message": "An unexpected error occurred",
                    # Don't leak error details in production
                    "details": str(exc) if settings["debug"] else None,
                }
            }
        )

    app.include_router(health_router, prefix="/api/v1", tags=["health"])
    app.include_router(trades_router, prefix="/api/v1", tags=["trades"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": settings["title"],
            "version": settings["version"],
            "description": settings["description"],
            "docs_url": "/docs" if settings["debug"] else None,
            "health_check": "/api/v1/health",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "couchlytics.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=config.DEBUG,
        log_level="info"
    )
