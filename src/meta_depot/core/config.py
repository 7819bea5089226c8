"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised when a setting required by the selected code path is missing.

    Args:
        env_var: Name of the environment variable that must be set.
        purpose: Short description of what the variable configures.
    """

    def __init__(self, env_var: str, purpose: str) -> None:
        self.env_var = env_var
        super().__init__(f"Missing environment variable with {purpose}: {env_var}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Depot
    depot_base_url: str | None = Field(
        default=None,
        description="Public base URL under which published listings are served",
    )
    local_depot_path: str | None = Field(
        default=None,
        description="Publish into this local directory instead of the WebDAV depot manager",
    )
    depot_manager_base_url: str | None = Field(
        default=None,
        description="WebDAV endpoint of the depot manager",
    )
    depot_manager_token: str | None = Field(
        default=None,
        description="Bearer token for the depot manager",
    )

    # Meta API
    meta_api_base_url: str = Field(
        default="https://meta-api.neoforged.net/v1/",
        description="Base URL of the version metadata API",
    )
    meta_api_api_key: str | None = Field(
        default=None,
        description="API key for the version metadata API (sent as X-API-Key)",
    )
    meta_api_token: str | None = Field(
        default=None,
        description="Bearer token for the version metadata API (used when no API key is set)",
    )
    meta_api_concurrency: int = Field(
        default=10,
        description="Maximum number of concurrent requests to the version metadata API",
        gt=0,
    )
    meta_api_timeout: float = Field(
        default=30.0,
        description="Version metadata API request timeout in seconds",
        gt=0,
    )

    @field_validator("meta_api_base_url")
    @classmethod
    def validate_meta_api_base_url(cls, v: str) -> str:
        return v.rstrip("/") + "/"

    # Output
    format_output: bool = Field(
        default=False,
        description="Pretty-print generated JSON listings",
    )
    destination_folder: str = Field(
        default="output",
        description="Local folder the listings are compiled into before syncing",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit log records to stderr as JSON",
    )

    def require_meta_api_credentials(self) -> None:
        """Fail fast when neither meta API credential is configured.

        Raises:
            ConfigurationError: If both META_API_TOKEN and META_API_API_KEY are unset.
        """
        if not self.meta_api_token and not self.meta_api_api_key:
            raise ConfigurationError("META_API_TOKEN or META_API_API_KEY", "meta API credentials")


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
