"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import settings
from .controllers import auth, dictations, uploads, words
from .database import dispose_engine, init_models, ping_database
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .services import (
    AccessDeniedError,
    AuthoringError,
    InvalidInputError,
    NotFoundError,
    StorageFailure,
)
from .views import ErrorResponse

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_ERROR_STATUS: dict[type[AuthoringError], int] = {
    InvalidInputError: 400,
    AccessDeniedError: 403,
    NotFoundError: 404,
}


def _rotating_handler(path: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _configure_logging() -> None:
    """Route application logs to stdout and a rotating file.

    Request lines from the middleware go to stdout only, and audio
    resolution outcomes additionally land in their own file.
    """

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(_rotating_handler(settings.log_file, 1_000_000, _LOG_FORMAT))
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("dictation_api.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    audio_logger = logging.getLogger("dictation_api.services.audio_resolver")
    audio_logger.handlers.clear()
    audio_logger.addHandler(
        _rotating_handler(
            settings.audio_log_file,
            500_000,
            "%(asctime)s | %(levelname)s | %(message)s",
        )
    )
    audio_logger.setLevel(logging.INFO)

    for name in ("botocore", "boto3", "httpx", "httpcore", "urllib3", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)


async def _authoring_error_handler(request: Request, exc: AuthoringError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), code=exc.code).model_dump(),
    )


async def _storage_failure_handler(request: Request, exc: StorageFailure) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error", code=exc.code).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Dictation authoring and practice API",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    for module in (auth, dictations, words, uploads):
        app.include_router(module.router, prefix=settings.api_prefix)

    if settings.storage.backend == "local":
        upload_dir = Path(settings.storage.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.storage.url_prefix,
            StaticFiles(directory=upload_dir),
            name="uploads",
        )

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> JSONResponse:
        """Report liveness along with database reachability."""

        database_ok = await ping_database()
        return JSONResponse(
            status_code=200 if database_ok else 503,
            content={
                "status": "healthy" if database_ok else "degraded",
                "database": "ok" if database_ok else "unreachable",
                "service": settings.app_name,
                "version": settings.app_version,
            },
        )

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.add_exception_handler(StorageFailure, _storage_failure_handler)
    app.add_exception_handler(AuthoringError, _authoring_error_handler)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        await init_models()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "dictation_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
