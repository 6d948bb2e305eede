"""
pgrest - Key-Value Provider
===========================

What:  Produces flat `{dotted.key: value}` layers from built-in defaults,
       a TOML file and the process environment, and merges them.
Why:   Precedence is the crux of configuration correctness. Keeping each
       layer a plain dict makes the merge order explicit and testable
       without touching the filesystem or `os.environ`.
How:   defaults → file → environment, merged key by key; later layers win.

Key convention:
    File:         [http] port = 6000          → "http.port"
    Environment:  PREST_HTTP_PORT=6000        → "http.port"
                  (prefix + key upper-cased, "." replaced with "_")
"""

import logging
import tomllib
from typing import Any, Dict, Mapping

from pgrest.config.models import PrestConfig
from pgrest.exceptions import ConfigFileError, ConfigFileNotFoundError

logger = logging.getLogger(__name__)

ENV_PREFIX = "PREST_"

# Dotted configuration key → PrestConfig field name.
# `access.*` keys are decoded separately into an AccessPolicy.
KEY_FIELDS: Dict[str, str] = {
    "http.host": "http_host",
    "http.port": "http_port",
    "https.mode": "https_mode",
    "https.cert": "https_cert",
    "https.key": "https_key",
    "pg.host": "pg_host",
    "pg.port": "pg_port",
    "pg.user": "pg_user",
    "pg.pass": "pg_pass",
    "pg.database": "pg_database",
    "pg.url": "pg_url",
    "pg.maxidleconn": "pg_max_idle_conn",
    "pg.maxopenconn": "pg_max_open_conn",
    "pg.conntimeout": "pg_conn_timeout",
    "ssl.mode": "ssl_mode",
    "ssl.cert": "ssl_cert",
    "ssl.key": "ssl_key",
    "ssl.rootcert": "ssl_root_cert",
    "jwt.key": "jwt_key",
    "jwt.algo": "jwt_algo",
    "jwt.default": "enable_default_jwt",
    "cors.alloworigin": "cors_allow_origin",
    "cors.allowheaders": "cors_allow_headers",
    "context": "context_path",
    "migrations": "migrations_path",
    "queries.location": "queries_path",
    "debug": "debug",
    "cache.enable": "enable_cache",
}

ACCESS_RESTRICT_KEY = "access.restrict"
ACCESS_TABLES_KEY = "access.tables"

# Keys that may be overridden from the environment. The table rules are a
# list of tables and have no flat environment representation.
ENV_KEYS = tuple(KEY_FIELDS) + (ACCESS_RESTRICT_KEY,)


def env_name(key: str, prefix: str = ENV_PREFIX) -> str:
    """`"pg.maxidleconn"` → `"PREST_PG_MAXIDLECONN"`."""
    return prefix + key.upper().replace(".", "_")


def default_values() -> Dict[str, Any]:
    """Lowest layer: the dotted-key view of `PrestConfig()` defaults."""
    defaults = PrestConfig()
    values: Dict[str, Any] = {key: getattr(defaults, field) for key, field in KEY_FIELDS.items()}
    values[ACCESS_RESTRICT_KEY] = defaults.access.restrict
    values[ACCESS_TABLES_KEY] = []
    return values


def _lower_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k).lower(): v for k, v in value.items()}
    return value


def _flatten(tree: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        dotted = prefix + str(key).lower()
        if dotted == ACCESS_TABLES_KEY:
            # Kept whole so a single [access.tables] table fails decoding
            # instead of vanishing into access.tables.* keys.
            if isinstance(value, list):
                value = [_lower_keys(rule) for rule in value]
            flat[dotted] = _lower_keys(value)
        elif isinstance(value, Mapping):
            flat.update(_flatten(value, dotted + "."))
        else:
            flat[dotted] = value
    return flat


def load_file_values(path: str) -> Dict[str, Any]:
    """
    Read a TOML config file into a flat dotted-key layer.

    Nested tables become dotted keys; arrays are kept as values.
    `access.tables` is never flattened and its rule keys are lower-cased.
    Unknown keys are carried along and ignored later.

    Raises:
        ConfigFileNotFoundError: `path` does not exist.
        ConfigFileError: the file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as exc:
        raise ConfigFileNotFoundError(path) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(path, str(exc)) from exc
    except OSError as exc:
        raise ConfigFileError(path, exc.strerror or str(exc)) from exc

    values = _flatten(data)
    logger.debug("Read %d keys from %s", len(values), path)
    return values


def environment_values(environ: Mapping[str, str], prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """Environment layer. Empty variables count as unset."""
    values: Dict[str, Any] = {}
    for key in ENV_KEYS:
        raw = environ.get(env_name(key, prefix))
        if raw:
            values[key] = raw
    return values


def merge_layers(*layers: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge flat layers in order; a key in a later layer replaces earlier ones."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged
