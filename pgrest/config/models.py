"""
pgrest - Configuration Record
=============================

What:  The fully-resolved, immutable service configuration (`PrestConfig`)
       and the access policy it embeds.
Why:   One typed record replaces a process-wide mutable config object.
       Every consumer receives the record explicitly and cannot change it.
How:   Frozen pydantic models. Sequences are stored as tuples so the record
       is read-only in depth, not only at the attribute level.

Field defaults here are the single source of built-in defaults: the
Key-Value Provider derives its lowest layer from `PrestConfig()`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LIST_SEPARATORS = re.compile(r"[,\s]+")


def split_list_value(value: Any) -> Any:
    """Split a comma/whitespace separated string; pass other values through."""
    if isinstance(value, str):
        return tuple(item for item in _LIST_SEPARATORS.split(value) if item)
    return value


def _default_queries_path() -> str:
    return str(Path.home() / "queries")


class TableRule(BaseModel):
    """Permissions and visible columns for one table."""

    model_config = ConfigDict(frozen=True)

    name: str
    permissions: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()


class AccessPolicy(BaseModel):
    """
    Restriction flag plus ordered table rules.

    Rule order follows the source document and is preserved as-is.
    """

    model_config = ConfigDict(frozen=True)

    restrict: bool = False
    tables: Tuple[TableRule, ...] = ()


class PrestConfig(BaseModel):
    """
    Resolved service configuration.

    Grouped by concern. Every field has a default, so a record built from
    no sources at all is still fully populated.
    """

    # TOML `pass = 1234` is a string setting written as a number
    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    # ── Network ───────────────────────────────────────────────────────────
    http_host: str = "0.0.0.0"
    http_port: int = Field(default=3000, ge=0, le=65535)
    https_mode: bool = False
    https_cert: str = "/etc/certs/cert.crt"
    https_key: str = "/etc/certs/cert.key"

    # ── Database ──────────────────────────────────────────────────────────
    pg_host: str = "127.0.0.1"
    pg_port: int = Field(default=5432, ge=0, le=65535)
    pg_user: str = ""
    pg_pass: str = ""
    pg_database: str = ""
    pg_url: str = ""
    ssl_mode: str = "disable"
    ssl_cert: str = ""
    ssl_key: str = ""
    ssl_root_cert: str = ""
    pg_max_idle_conn: int = 10
    pg_max_open_conn: int = 10
    pg_conn_timeout: int = 10

    # ── Auth ──────────────────────────────────────────────────────────────
    jwt_key: str = ""
    jwt_algo: str = "HS256"
    enable_default_jwt: bool = True

    # ── CORS ──────────────────────────────────────────────────────────────
    # ("false",) is the disabled marker, see is_cors_disabled()
    cors_allow_origin: Tuple[str, ...] = ("*",)
    cors_allow_headers: Tuple[str, ...] = ("*",)

    # ── Paths ─────────────────────────────────────────────────────────────
    context_path: str = "/"
    migrations_path: str = ""
    queries_path: str = Field(default_factory=_default_queries_path)

    # ── Flags ─────────────────────────────────────────────────────────────
    debug: bool = False
    enable_cache: bool = True

    access: AccessPolicy = Field(default_factory=AccessPolicy)

    @field_validator("cors_allow_origin", "cors_allow_headers", mode="before")
    @classmethod
    def split_strings(cls, v: Any) -> Any:
        """Environment variables deliver lists as one string: "a, b c"."""
        return split_list_value(v)
