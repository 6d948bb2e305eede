"""
pgrest - Exception Hierarchy
============================

What:  Application-specific exceptions raised while resolving configuration.
Why:   Callers (the application factory, tests, operators reading a traceback)
       need to tell a missing config file apart from a bad connection URL.
How:   Each exception carries a human-readable message and an optional
       context dict with the offending path, key or value.
Who:   Raised by the `pgrest.config` package; caught by nobody inside the
       package. Fatal ones propagate out of `create_app()` so the server
       never starts on a guessed configuration.

Exception Hierarchy:
    PrestError (base)
    ├── ConfigFileNotFoundError  → explicitly requested file is missing (fatal)
    ├── ConfigFileError          → file exists but is not readable TOML (fatal)
    ├── ConfigValueError         → a value cannot be coerced to its field type (fatal)
    ├── AccessPolicyError        → `access.tables` has the wrong shape (fatal)
    └── ConnectionURLError       → connection URL or its port is malformed
"""

from typing import Any, Dict, Optional


class PrestError(Exception):
    """
    Base exception for all pgrest errors.

    Attributes:
        message:  Human-readable description of the failure
        context:  Extra debugging details (path, key, raw value)
    """

    def __init__(
        self,
        message: str = "An unexpected configuration error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigFileNotFoundError(PrestError):
    """
    Raised when an explicitly requested configuration file does not exist.

    A missing file at the conventional default location is NOT an error;
    the locator simply reports "no file" in that case.
    """

    def __init__(self, path: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message=f"File {path} not found. Aborting.", context=ctx)
        self.path = path


class ConfigFileError(PrestError):
    """Raised when a configuration file cannot be read or decoded as TOML."""

    def __init__(
        self,
        path: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message=f"Cannot read config file {path}: {reason}", context=ctx)
        self.path = path


class ConfigValueError(PrestError):
    """Raised when a resolved value does not fit its field (e.g. `http.port = "abc"`)."""


class AccessPolicyError(PrestError):
    """
    Raised when the `access` sub-tree cannot be decoded into an AccessPolicy.

    Typical causes: `access.tables` is not a list, a rule is not a table,
    or `permissions` / `fields` are not lists of strings.
    """


class ConnectionURLError(PrestError):
    """
    Raised when a connection URL cannot be decomposed.

    Covers both an unparseable URL and a non-numeric or out-of-range port.
    No partially-updated record is returned in this case.
    """

    def __init__(
        self,
        message: str = "Invalid connection URL",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
