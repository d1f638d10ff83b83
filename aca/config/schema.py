# ACA Configuration Schema
# Pydantic model for the CLI configuration file

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from aca.config.defaults import DEFAULT_OWNER_ID, DEFAULT_SERVER_URL, DEFAULT_TIMEOUT


class OutputConfig(BaseModel):
    """Output configuration."""

    verbose: bool = Field(default=False, description="Show individual scan warnings")
    colored: bool = Field(default=True, description="Enable colored output")


class AcaConfig(BaseModel):
    """Root configuration model for the aca CLI."""

    server_url: str = Field(default=DEFAULT_SERVER_URL, description="Config server base URL")
    api_key: str | None = Field(default=None, description="API key from the server profile page")
    last_sync: str | None = Field(default=None, description="ISO timestamp of the last applied sync")
    store_path: str | None = Field(
        default=None,
        description="Directory of an offline store; when set, syncs go there instead of the server",
    )
    owner_id: str = Field(default=DEFAULT_OWNER_ID, min_length=1, description="Owner id used with the offline store")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize server URL."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"server_url must start with http:// or https://, got {v!r}")
        return v

    @field_validator("store_path")
    @classmethod
    def expand_store_path(cls, v: str | None) -> str | None:
        """Expand ~ in store path."""
        if v is None:
            return None
        return str(Path(v).expanduser())

    @property
    def masked_api_key(self) -> str | None:
        """API key reduced to its first 12 characters."""
        if not self.api_key:
            return None
        return self.api_key[:12] + "..."
