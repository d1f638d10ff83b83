# ACA Configuration Loader
# Load, save, and validate the YAML configuration file

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from aca.config.schema import AcaConfig
from aca.utils.paths import atomic_write


def get_config_dir() -> Path:
    """Get the aca configuration directory."""
    return Path.home() / ".config" / "aca"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("ACA_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def config_exists(config_path: Optional[Path] = None) -> bool:
    """Check if a configuration file exists."""
    return (config_path or get_config_path()).exists()


def load_config(config_path: Optional[Path] = None) -> AcaConfig:
    """
    Load configuration from YAML file.

    A missing file yields the default configuration, so commands work
    before the first login.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        AcaConfig: Validated configuration object.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValidationError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return AcaConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return AcaConfig.model_validate(data)


def save_config(config: AcaConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    The file holds the API key, so it is readable by the owner only.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    data = config.model_dump(exclude_none=True, mode="json")
    atomic_write(config_path, yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    os.chmod(config_path, 0o600)

    return config_path


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    errors: list[str] = []

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    try:
        config = AcaConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    # Additional validation
    if config.api_key is None and config.store_path is None:
        errors.append("No api_key or store_path configured. Run 'aca login' first.")

    return len(errors) == 0, errors


def update_last_sync(config_path: Optional[Path] = None) -> Optional[AcaConfig]:
    """
    Record the current time as the last applied sync.

    Does nothing if no configuration file exists yet.

    Returns:
        Updated AcaConfig, or None if there was no file.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return None

    config = load_config(config_path)
    config.last_sync = datetime.now(timezone.utc).isoformat()
    save_config(config, config_path)
    return config


def resolve_server_url(override: Optional[str] = None, config: Optional[AcaConfig] = None) -> str:
    """
    Pick the server URL: explicit override, then config file, then default.

    Args:
        override: Value of a --server option.
        config: Already loaded configuration.

    Returns:
        Server base URL without trailing slash.
    """
    if override:
        return override.rstrip("/")
    if config is None:
        config = load_config()
    return config.server_url
