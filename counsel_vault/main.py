# counsel_vault/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from counsel_vault.api.middleware import (
    CallerContextMiddleware,
    CorrelationIdMiddleware,
    RequestLogMiddleware,
)
from counsel_vault.api.routers import audit, health, records
from counsel_vault.application.exceptions import (
    ApplicationError,
    DataIntegrityError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
)
from counsel_vault.config.logging import configure_logging
from counsel_vault.config.settings import AppSettings, get_settings
from counsel_vault.dependencies import build_cipher
from counsel_vault.domain.exceptions import DomainError, DomainValidationError
from counsel_vault.infrastructure.database.session import create_engine, create_session_factory
from counsel_vault.security.cipher import CipherEngine

logger = logging.getLogger(__name__)


def startup(settings: Optional[AppSettings] = None) -> CipherEngine:
    """
    Resolve the record key once and build the process-wide cipher.
    ConfigurationError propagates; the host must not start without a valid key.
    """
    settings = settings or get_settings()
    cipher = build_cipher(settings)
    logger.info("startup_complete")
    return cipher


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    app.state.cipher = startup(settings)
    engine = create_engine(settings.database_url, echo=settings.debug)
    app.state.session_factory = create_session_factory(engine)
    try:
        yield
    finally:
        await engine.dispose()


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware order: last added runs first (outermost). Request flow: CorrelationId -> CallerContext -> RequestLog.
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(CallerContextMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    @app.exception_handler(DomainValidationError)
    async def domain_validation_error_handler(request, exc: DomainValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})

    @app.exception_handler(DomainError)
    async def domain_error_handler(request, exc: DomainError):
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(PermissionDeniedError)
    async def permission_denied_handler(request, exc: PermissionDeniedError):
        return JSONResponse(status_code=403, content={"detail": exc.message})

    @app.exception_handler(NotAssignedError)
    async def not_assigned_handler(request, exc: NotAssignedError):
        return JSONResponse(status_code=403, content={"detail": exc.message})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Record not found"})

    @app.exception_handler(DataIntegrityError)
    async def data_integrity_handler(request, exc: DataIntegrityError):
        return JSONResponse(status_code=500, content={"detail": "Record content could not be verified"})

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request, exc: ApplicationError):
        return JSONResponse(status_code=500, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Routers: /health, /records, /audit
    app.include_router(health.router)
    app.include_router(records.router, prefix="/records")
    app.include_router(audit.router, prefix="/audit")
    return app


app = create_app()
