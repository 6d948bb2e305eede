"""
pgrest - Database Engine
========================

What:  Builds the async SQLAlchemy engine from a resolved PrestConfig.
Why:   Pool limits, connect timeout and SSL settings are part of the
       configuration record; this module is where they take effect.
How:   PrestConfig → SQLAlchemy URL (postgresql+asyncpg) + engine options.
       The engine is created in the application lifespan, not at import,
       so importing pgrest never opens or configures a pool.

Pool mapping:
    pg.maxidleconn  → pool_size      (connections kept open)
    pg.maxopenconn  → pool_size + max_overflow  (hard ceiling)
    pg.conntimeout  → asyncpg connect timeout (seconds)
"""

import ssl
from typing import Any, Dict, Union

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pgrest.config.models import PrestConfig

DRIVER_NAME = "postgresql+asyncpg"


def build_database_url(config: PrestConfig) -> URL:
    """Connection URL for SQLAlchemy; empty credentials are omitted."""
    return URL.create(
        drivername=DRIVER_NAME,
        username=config.pg_user or None,
        password=config.pg_pass or None,
        host=config.pg_host or None,
        port=config.pg_port,
        database=config.pg_database or None,
    )


def _ssl_argument(config: PrestConfig) -> Union[str, ssl.SSLContext]:
    # asyncpg takes either a libpq-style sslmode string or an SSLContext.
    # Client certificates need the context form.
    if config.ssl_mode == "disable" or not (config.ssl_cert or config.ssl_root_cert):
        return config.ssl_mode

    context = ssl.create_default_context(cafile=config.ssl_root_cert or None)
    if config.ssl_mode in ("require", "prefer", "allow"):
        # libpq semantics: encrypt, but do not verify the server certificate
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if config.ssl_cert:
        context.load_cert_chain(config.ssl_cert, config.ssl_key or None)
    return context


def engine_options(config: PrestConfig) -> Dict[str, Any]:
    """Keyword arguments for `create_async_engine` derived from `config`."""
    pool_size = max(config.pg_max_idle_conn, 1)
    return {
        "pool_size": pool_size,
        "max_overflow": max(config.pg_max_open_conn - pool_size, 0),
        "pool_pre_ping": True,
        "echo": config.debug,
        "connect_args": {
            "timeout": config.pg_conn_timeout,
            "ssl": _ssl_argument(config),
        },
    }


def create_engine(config: PrestConfig) -> AsyncEngine:
    """Create (but do not connect) the async engine for `config`."""
    return create_async_engine(build_database_url(config), **engine_options(config))
