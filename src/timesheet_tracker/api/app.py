"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timesheet_tracker import __version__
from timesheet_tracker.api.routes import (
    auth_router,
    entries_router,
    health_router,
    manager_router,
)
from timesheet_tracker.config import Settings, get_settings
from timesheet_tracker.database import create_engine, create_session_factory, init_db
from timesheet_tracker.exceptions import TimesheetError

logger = logging.getLogger(__name__)


def _lifespan(session_factory: async_sessionmaker[AsyncSession] | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Own the store handle for the lifetime of the process."""
        if session_factory is not None:
            # Caller owns the engine
            app.state.session_factory = session_factory
            yield
            return

        engine = create_engine(app.state.settings.database_url)
        await init_db(engine)
        app.state.session_factory = create_session_factory(engine)
        try:
            yield
        finally:
            await engine.dispose()

    return lifespan


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` lets the caller supply an already initialised store;
    otherwise one is built from ``settings.database_url`` at startup.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Timesheet Tracker API",
        description="Work entry logging with manager approval",
        version=__version__,
        lifespan=_lifespan(session_factory),
    )
    app.state.settings = settings
    if session_factory is not None:
        app.state.session_factory = session_factory

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TimesheetError)
    async def timesheet_exception_handler(
        request: Request, exc: TimesheetError
    ) -> JSONResponse:
        """Render domain errors with their status and code."""
        content: dict = {"detail": exc.message, "code": exc.code}
        fields = getattr(exc, "fields", None)
        if fields:
            content["fields"] = fields
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request input as a 400 validation error."""
        # A JSON syntax error is located by byte offset, not by field name
        fields = sorted(
            {
                err["loc"][-1]
                for err in exc.errors()
                if len(err.get("loc", ())) > 1 and isinstance(err["loc"][-1], str)
            }
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid or missing fields",
                "code": "VALIDATION_ERROR",
                "fields": fields,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api")
    app.include_router(entries_router, prefix="/api")
    app.include_router(manager_router, prefix="/api")

    return app
