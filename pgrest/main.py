"""
pgrest - FastAPI Application Factory
====================================

What:  Creates the FastAPI application from a resolved configuration.
Why:   Keeps startup order in one place: settings → logging → config →
       middleware → routes. A fatal configuration error raised here
       propagates to the server process, which then refuses to start.
How:   Factory pattern. Run with uvicorn's factory mode:

           uvicorn pgrest.main:create_app --factory

Lifecycle:
    Startup:  create the database engine from the record (no connection yet)
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from pgrest import __version__
from pgrest.config import PrestConfig, load_config
from pgrest.database import create_engine
from pgrest.middleware.stack import MiddlewareProvider, build_middleware_stack
from pgrest.routes import health
from pgrest.settings import ServerSettings

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def route_prefix(context_path: str) -> str:
    """`"/"` → `""`, `"api/"` → `"/api"`: the form APIRouter prefixes expect."""
    stripped = context_path.strip("/")
    return f"/{stripped}" if stripped else ""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: PrestConfig = app.state.config

    app.state.engine = create_engine(config)
    scheme = "https" if config.https_mode else "http"
    logger.info(
        "pgrest %s ready on %s://%s:%d%s (database %s:%d/%s)",
        __version__,
        scheme,
        config.http_host,
        config.http_port,
        route_prefix(config.context_path) or "/",
        config.pg_host,
        config.pg_port,
        config.pg_database,
    )
    if not config.debug and not config.jwt_key:
        logger.warning("JWT authentication is enabled but jwt.key is empty; every request will be rejected")

    yield

    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


def create_app(
    config: Optional[PrestConfig] = None,
    settings: Optional[ServerSettings] = None,
    provider: Optional[MiddlewareProvider] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:   Pre-resolved configuration. When omitted, bootstrap
                  settings are read from the environment, logging is
                  configured and `load_config()` resolves the record.
        settings: Bootstrap settings override (tests).
        provider: Middleware provider override; defaults to StandardHandlers.

    Raises:
        PrestError subclasses from `load_config()`; the app is not created.
    """
    if config is None:
        settings = settings or ServerSettings()
        setup_logging(settings.log_level)
        config = load_config(settings.conf)

    app = FastAPI(
        title="pgrest",
        version=__version__,
        debug=config.debug,
        lifespan=lifespan,
        middleware=build_middleware_stack(config, provider),
    )
    # Read-only for everything downstream; a reload builds a new app.
    app.state.config = config

    app.include_router(health.router, prefix=route_prefix(config.context_path))

    return app
