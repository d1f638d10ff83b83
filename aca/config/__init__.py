# ACA Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from aca.config.defaults import API_KEY_PREFIX, DEFAULT_SERVER_URL
from aca.config.loader import (
    config_exists,
    get_config_dir,
    get_config_path,
    load_config,
    resolve_server_url,
    save_config,
    update_last_sync,
    validate_config_file,
)
from aca.config.schema import AcaConfig, OutputConfig

__all__ = [
    # Schema
    "AcaConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "save_config",
    "get_config_dir",
    "get_config_path",
    "config_exists",
    "validate_config_file",
    "update_last_sync",
    "resolve_server_url",
    # Defaults
    "DEFAULT_SERVER_URL",
    "API_KEY_PREFIX",
]
