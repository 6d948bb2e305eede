"""Configuration resolution: locate, layer, resolve, decompose."""

from pgrest.config.locator import DEFAULT_CONFIG_FILE, locate_config_file
from pgrest.config.models import AccessPolicy, PrestConfig, TableRule
from pgrest.config.resolver import ensure_queries_dir, load_config, resolve_config
from pgrest.config.url import ConnectionFields, apply_connection_url, parse_connection_url

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AccessPolicy",
    "ConnectionFields",
    "PrestConfig",
    "TableRule",
    "apply_connection_url",
    "ensure_queries_dir",
    "load_config",
    "locate_config_file",
    "parse_connection_url",
    "resolve_config",
]
