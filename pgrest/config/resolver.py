"""
pgrest - Configuration Resolver
===============================

What:  Turns layered key-value sources into a fully-populated PrestConfig.
Why:   The precedence rules below decide which database the service talks
       to and which port it listens on; they live in one auditable place.
How:   merge(defaults, file, environment) → special-case precedence →
       typed record → optional connection-URL overrides.

Precedence (highest wins):
    Listen port:  PREST_HTTP_PORT > PORT > file > default
    Database:     DATABASE_URL > pg.url (PREST_PG_URL / file) > pg.* fields
    jwt.default:  environment > file > default (true)
    Everything else: environment > file > default

Entry point:
    load_config() locates the file, resolves the record and creates the
    queries directory. Fatal errors propagate to the caller; the service
    must not start on a guessed configuration.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from pgrest.config.locator import DEFAULT_CONFIG_FILE, locate_config_file
from pgrest.config.models import AccessPolicy, PrestConfig
from pgrest.config.provider import (
    ACCESS_RESTRICT_KEY,
    ACCESS_TABLES_KEY,
    KEY_FIELDS,
    default_values,
    env_name,
    environment_values,
    load_file_values,
    merge_layers,
)
from pgrest.config.url import apply_connection_url
from pgrest.exceptions import AccessPolicyError, ConfigValueError

logger = logging.getLogger(__name__)

# Set by PaaS hosts (Heroku and friends); deliberately outside the PREST_ prefix.
PLATFORM_PORT_ENV = "PORT"
PLATFORM_DATABASE_URL_ENV = "DATABASE_URL"


def _apply_platform_port(values: Dict[str, Any], environ: Mapping[str, str]) -> None:
    if environ.get(env_name("http.port")):
        return
    platform_port = environ.get(PLATFORM_PORT_ENV)
    if platform_port:
        values["http.port"] = platform_port


def _decode_access_policy(values: Mapping[str, Any]) -> AccessPolicy:
    tables = values.get(ACCESS_TABLES_KEY)
    try:
        return AccessPolicy.model_validate(
            {
                "restrict": values.get(ACCESS_RESTRICT_KEY, False),
                "tables": [] if tables is None else tables,
            }
        )
    except ValidationError as exc:
        raise AccessPolicyError(
            f"Malformed access policy: {exc.error_count()} invalid value(s)",
            context={"errors": exc.errors(include_url=False, include_input=False)},
        ) from exc


def _build_record(values: Mapping[str, Any]) -> PrestConfig:
    data: Dict[str, Any] = {
        field: values[key] for key, field in KEY_FIELDS.items() if key in values
    }
    data["access"] = _decode_access_policy(values)
    try:
        return PrestConfig.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ConfigValueError(
            f"Invalid configuration value(s) for: {', '.join(fields)}",
            context={"errors": exc.errors(include_url=False, include_input=False)},
        ) from exc


def resolve_config(
    file_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PrestConfig:
    """
    Resolve a PrestConfig from a file layer and an environment mapping.

    Pure apart from reading `os.environ` when `environ` is None: no file
    access and no directory creation, so precedence can be tested directly.

    Raises:
        AccessPolicyError: `access.tables` has the wrong shape.
        ConfigValueError: a value cannot be coerced to its field type.
        ConnectionURLError: the effective connection URL is malformed.
    """
    if environ is None:
        environ = os.environ

    values = merge_layers(default_values(), file_values or {}, environment_values(environ))
    _apply_platform_port(values, environ)

    config = _build_record(values)

    url = environ.get(PLATFORM_DATABASE_URL_ENV) or config.pg_url
    if url:
        config = apply_connection_url(config, url)

    return config


def ensure_queries_dir(path: str) -> None:
    """Create the queries directory if missing. Failure is logged, not raised."""
    queries = Path(path)
    if queries.exists():
        return
    try:
        queries.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Queries directory %s is not created: %s", path, e)


def load_config(
    conf_path: str = "",
    environ: Optional[Mapping[str, str]] = None,
    default_file: str = DEFAULT_CONFIG_FILE,
) -> PrestConfig:
    """
    Load the service configuration.

    Args:
        conf_path:    Explicit config file (usually PREST_CONF). Empty means
                      "use ./prest.toml when present".
        environ:      Environment mapping; defaults to `os.environ`.
        default_file: Conventional config file location.

    Raises:
        ConfigFileNotFoundError: `conf_path` was given but does not exist.
        ConfigFileError: the file is not valid TOML.
        AccessPolicyError, ConfigValueError, ConnectionURLError: see resolve_config().
    """
    path = locate_config_file(conf_path, default_file)
    if path:
        file_values = load_file_values(path)
        logger.info("Configuration loaded from %s", path)
    else:
        file_values = {}
        logger.info("No configuration file found; using defaults and environment")

    config = resolve_config(file_values, environ)
    ensure_queries_dir(config.queries_path)
    return config
