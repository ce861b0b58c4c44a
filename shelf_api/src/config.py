"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (prefix, bind address)
- Airtable record store credentials and table names
- Metadata lookup services (Open Library, OMDb)
- Password hashing
- Profile picture uploads
- Logging and monitoring

All settings support environment variable overrides and .env file loading.
The settings object is frozen: it is built once at process entry and passed
explicitly to every component that needs it.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
from functools import lru_cache

from shelf_api.src.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variables are unprefixed and case-insensitive (e.g. AIRTABLE_BASE_ID,
    PORT).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Shelf API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    api_prefix: str = Field(
        default="/api",
        description="API URL prefix"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables auto-reload and console logs"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=3001,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Airtable Settings
    # =========================================================================

    airtable_base_id: Optional[str] = Field(
        default=None,
        description="Airtable base identifier (starts with 'app')"
    )
    airtable_api_key: Optional[str] = Field(
        default=None,
        description="Airtable personal access token ('pat...') or legacy key ('key...')"
    )
    airtable_table_name: str = Field(
        default="Users",
        description="Airtable table holding user records"
    )
    airtable_books_table: str = Field(
        default="Books",
        description="Airtable table holding saved books"
    )
    airtable_movies_table: str = Field(
        default="Movies",
        description="Airtable table holding saved movies and shows"
    )
    airtable_reviews_table: str = Field(
        default="Reviews",
        description="Airtable table holding book reviews"
    )
    airtable_api_url: str = Field(
        default="https://api.airtable.com/v0",
        description="Airtable REST API root"
    )

    # =========================================================================
    # Metadata Lookup Settings
    # =========================================================================

    omdb_api_key: Optional[str] = Field(
        default=None,
        description="OMDb API key for movie/show lookups"
    )
    omdb_api_url: str = Field(
        default="https://www.omdbapi.com/",
        description="OMDb API endpoint"
    )
    open_library_url: str = Field(
        default="https://openlibrary.org",
        description="Open Library API root"
    )
    open_library_covers_url: str = Field(
        default="https://covers.openlibrary.org",
        description="Open Library covers root"
    )

    # =========================================================================
    # Password Hashing Settings
    # =========================================================================

    password_bcrypt_rounds: int = Field(
        default=12,
        description="BCrypt hash rounds (higher = slower but more secure)",
        ge=4,
        le=14
    )
    password_min_length: int = Field(
        default=6,
        description="Minimum password length at registration",
        ge=1,
        le=128
    )

    # =========================================================================
    # Upload Settings
    # =========================================================================

    upload_dir: str = Field(
        default="uploads",
        description="Local directory receiving profile pictures"
    )
    upload_url_path: str = Field(
        default="/uploads",
        description="Public URL path the upload directory is served under"
    )

    # =========================================================================
    # Reviews
    # =========================================================================

    recent_reviews_limit: int = Field(
        default=10,
        description="Default number of reviews returned by the recent listing",
        gt=0,
        le=100
    )

    # =========================================================================
    # Logging and Monitoring
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Enable Prometheus metrics"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("api_prefix", "upload_url_path")
    @classmethod
    def validate_path_prefix(cls, v: str) -> str:
        """Normalize URL prefixes to a leading slash and no trailing slash."""
        return "/" + v.strip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def airtable_configured(self) -> bool:
        """Check if Airtable credentials are present."""
        return bool(self.airtable_base_id) and bool(self.airtable_api_key)

    @property
    def omdb_configured(self) -> bool:
        """Check if an OMDb API key is present."""
        return bool(self.omdb_api_key)

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        frozen=True,
    )


def validate_store_credentials(settings: Settings) -> None:
    """
    Check the presence and shape of the Airtable credentials.

    Run once at process entry; a failure is fatal.

    Args:
        settings: Application settings

    Raises:
        ConfigurationError: If a credential is missing or malformed
    """
    if not settings.airtable_base_id or not settings.airtable_api_key or not settings.airtable_table_name:
        raise ConfigurationError("Missing Airtable configuration. Please check your .env file.")

    if not settings.airtable_base_id.startswith("app"):
        raise ConfigurationError('Invalid Airtable Base ID. It should start with "app".')

    if not settings.airtable_api_key.startswith(("pat", "key")):
        raise ConfigurationError('Invalid Airtable API key. It should start with "pat" or "key".')


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Only the process entry point should call this; everything else receives
    the settings value through the application factory.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()
