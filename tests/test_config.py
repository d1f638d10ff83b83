# ACA Config Tests
# Tests for configuration loading and validation

import os
import stat
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from aca.config.defaults import DEFAULT_SERVER_URL
from aca.config.loader import (
    config_exists,
    get_config_path,
    load_config,
    resolve_server_url,
    save_config,
    update_last_sync,
    validate_config_file,
)
from aca.config.schema import AcaConfig


class TestAcaConfig:
    """Tests for AcaConfig schema."""

    def test_defaults(self):
        """Test configuration with default values."""
        config = AcaConfig()

        assert config.server_url == DEFAULT_SERVER_URL
        assert config.api_key is None
        assert config.owner_id == "local"
        assert config.output.colored is True

    def test_full_config(self, sample_config: dict):
        """Test full configuration loading."""
        config = AcaConfig.model_validate(sample_config)

        assert config.server_url == "https://aca.example.com"
        assert config.timeout == 5
        assert config.output.colored is False

    def test_server_url_scheme_required(self):
        """Test that non-HTTP server URLs are rejected."""
        with pytest.raises(ValidationError):
            AcaConfig(server_url="aca.example.com")

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            AcaConfig(timeout=0)

    def test_store_path_expanded(self, temp_home: Path):
        config = AcaConfig(store_path="~/aca-store")
        assert config.store_path == str(temp_home / "aca-store")

    def test_masked_api_key(self):
        """Test that only the key prefix is shown."""
        config = AcaConfig(api_key="aca_abcdefgh12345678")
        assert config.masked_api_key == "aca_abcdefgh..."
        assert AcaConfig().masked_api_key is None


class TestConfigLoader:
    """Tests for config loading functions."""

    def test_config_path_override(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Test ACA_CONFIG environment override."""
        monkeypatch.setenv("ACA_CONFIG", str(temp_dir / "custom.yaml"))
        assert get_config_path() == temp_dir / "custom.yaml"

    def test_default_config_path(self, temp_home: Path):
        assert get_config_path() == temp_home / ".config" / "aca" / "config.yaml"
        assert not config_exists()

    def test_load_missing_returns_defaults(self, temp_home: Path):
        """Test that a missing file is not an error."""
        config = load_config()
        assert config.api_key is None

    def test_load_empty_file(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path).server_url == DEFAULT_SERVER_URL

    def test_load_config_file(self, config_file: Path):
        config = load_config()
        assert config.api_key == "aca_test_key_1234567890"

    def test_save_config(self, temp_dir: Path):
        """Test saving configuration to file."""
        path = temp_dir / "nested" / "config.yaml"
        config = AcaConfig(api_key="aca_saved")

        saved = save_config(config, path)

        assert saved == path
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["api_key"] == "aca_saved"
        assert "last_sync" not in data
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_update_last_sync(self, config_file: Path):
        """Test recording the last sync timestamp."""
        updated = update_last_sync()

        assert updated.last_sync
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        assert data["last_sync"] == updated.last_sync
        assert data["api_key"] == "aca_test_key_1234567890"

    def test_update_last_sync_without_file(self, temp_home: Path):
        assert update_last_sync() is None
        assert not config_exists()

    def test_resolve_server_url(self, sample_config: dict):
        config = AcaConfig.model_validate(sample_config)

        assert resolve_server_url("http://localhost:8787/", config) == "http://localhost:8787"
        assert resolve_server_url(None, config) == "https://aca.example.com"


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_valid(self, config_file: Path):
        valid, errors = validate_config_file(config_file)
        assert valid
        assert errors == []

    def test_missing_file(self, temp_dir: Path):
        valid, errors = validate_config_file(temp_dir / "absent.yaml")
        assert not valid
        assert "not found" in errors[0]

    def test_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("server_url: [unclosed", encoding="utf-8")

        valid, errors = validate_config_file(path)

        assert not valid
        assert "Invalid YAML syntax" in errors[0]

    def test_empty_file(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        valid, errors = validate_config_file(path)

        assert not valid
        assert errors == ["Configuration file is empty"]

    def test_not_a_mapping(self, temp_dir: Path):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        valid, errors = validate_config_file(path)

        assert not valid
        assert errors == ["Configuration must be a mapping"]

    def test_schema_errors_have_locations(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("output:\n  colored: maybe\n", encoding="utf-8")

        valid, errors = validate_config_file(path)

        assert not valid
        assert errors[0].startswith("output -> colored:")

    def test_no_credentials(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("server_url: https://aca.example.com\n", encoding="utf-8")

        valid, errors = validate_config_file(path)

        assert not valid
        assert "aca login" in errors[0]

    def test_store_path_counts_as_configured(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text(f"store_path: {temp_dir / 'store'}\n", encoding="utf-8")

        valid, _ = validate_config_file(path)
        assert valid
