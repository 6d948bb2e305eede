"""Decide which configuration file, if any, to load."""

import os

DEFAULT_CONFIG_FILE = "./prest.toml"


def locate_config_file(override: str, default_path: str = DEFAULT_CONFIG_FILE) -> str:
    """
    Return the config file path to load, or "" for "no file".

    An explicit override is returned verbatim without checking the
    filesystem; if it is missing, the provider raises when reading it.
    Without an override the conventional default is used only when it
    exists on disk.
    """
    if override:
        return override
    if os.path.exists(default_path):
        return default_path
    return ""
