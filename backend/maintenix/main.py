"""Maintenix backend: FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before the other package imports (structlog
# caches the processor chain on first use).
from maintenix.core.logging import configure_structlog
from maintenix.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from maintenix.api.deps import get_attachment_store
from maintenix.api.routes import api_router
from maintenix.core.config import get_settings
from maintenix.core.exceptions import (
    AlreadyFinishedError,
    InvalidAttachmentError,
    MaintenixError,
    NotFoundError,
    NothingToUpdateError,
    SolutionRequiredError,
)
from maintenix.db import close_db, init_db
from maintenix.middleware.correlation import get_correlation_id, setup_correlation_middleware

logger = structlog.get_logger(__name__)

# Caller-facing domain errors and the client-error status they map to
ERROR_STATUS_CODES: dict[type[MaintenixError], int] = {
    NotFoundError: 404,
    AlreadyFinishedError: 409,
    NothingToUpdateError: 400,
    InvalidAttachmentError: 422,
    SolutionRequiredError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized")

    # Bucket bootstrap is non-fatal: uploads fail loudly later if storage is really down
    try:
        store = get_attachment_store()
        ensure_bucket = getattr(store, "ensure_bucket", None)
        if ensure_bucket is not None:
            await ensure_bucket()
        logger.info("storage_initialized")
    except Exception as e:
        logger.warning("storage_init_failed", error=str(e), error_type=type(e).__name__)

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


def status_code_for(exc: MaintenixError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def maintenix_exception_handler(request: Request, exc: MaintenixError) -> JSONResponse:
    """Map domain errors (NotFound, AlreadyFinished, ...) to client-error responses."""
    debug_id = str(uuid.uuid4())
    status_code = status_code_for(exc)

    logger.info(
        "domain_error",
        status_code=status_code,
        error_type=type(exc).__name__,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Global handler for HTTPException with debug_id tracking."""
    debug_id = str(uuid.uuid4())

    logger.error(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled errors: full log server-side, generic 500 to the client."""
    debug_id = str(uuid.uuid4())

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.exception_handler(MaintenixError)(maintenix_exception_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Maintenance work orders: lifecycle, photos and assignment notifications",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_correlation_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "maintenix.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
