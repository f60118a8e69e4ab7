"""
Snippetbox — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the engine, the Application
       context, middleware, exception handlers, routes and the static mount.
Who:   Called by uvicorn in factory mode (`snippetbox.main:create_app`), by
       `run()` / `python -m snippetbox`, and by the test suite.

Lifecycle:
    Startup:
    1. Configure logging
    2. Ping the database; an unreachable backend aborts startup
    3. Log the listen address

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox.application import Application
from snippetbox.config import Settings, get_settings
from snippetbox.database import create_engine, create_session_factory, dispose_engine, ping
from snippetbox.middleware.headers import CommonHeadersMiddleware
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware
from snippetbox.routes.dispatch import build_router, mount_static
from snippetbox.routes.helpers import request_uri
from snippetbox.services.snippet_model import Clock, SnippetModel, utc_now
from snippetbox.templating import TemplateRenderer

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] snippetbox.access: received request ...
    Output: stdout (container runtimes collect it from there).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # snippetbox.access already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Render framework-level failures as plain status text.

        HTTPException (unmatched path 404, wrong method 405, bad body 400)
            → status phrase, original headers (e.g. Allow) kept
        Exception (anything a handler did not anticipate)
            → logged with traceback, generic 500

    Storage and validation errors never reach here; the snippet handlers
    translate those themselves.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unexpected error: %s | method=%s uri=%s",
            exc,
            request.method,
            request_uri(request),
            exc_info=exc,
        )
        return PlainTextResponse("Internal Server Error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: defaults to the environment-derived settings.
        session_factory: inject an existing pool (tests). When omitted an
                         engine is built from settings.database_url and owned
                         by the app lifespan.
        clock: current-time source for expiry checks.
    """
    settings = settings or get_settings()

    engine = None
    if session_factory is None:
        engine = create_engine(settings)
        session_factory = create_session_factory(engine)

    application = Application(
        logger=logging.getLogger("snippetbox"),
        snippets=SnippetModel(session_factory, clock=clock),
        templates=TemplateRenderer(),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(settings.log_level)
        if engine is not None:
            try:
                await ping(engine)
            except (SQLAlchemyError, OSError) as e:
                logger.error("Database unreachable: %s", e)
                await dispose_engine(engine)
                raise
        logger.info("starting server addr=%s", settings.addr)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        if engine is not None:
            await dispose_engine(engine)
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Snippetbox",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.application = application

    # Last added runs first: RequestID → Logging → CommonHeaders → routes
    app.add_middleware(CommonHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(build_router(application))
    mount_static(app)

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host/port."""
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "snippetbox.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        access_log=False,
        server_header=False,
    )
