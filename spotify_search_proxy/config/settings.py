"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, in priority order:

  1. Environment variables, e.g. ``SPOTIFY_CLIENT_ID=...`` (always win)
  2. A ``.env`` file in the working directory (local development)

Field ``spotify_client_id`` maps to ``SPOTIFY_CLIENT_ID``; fields with an
explicit ``validation_alias`` (``PORT``) use that name instead.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from spotify_search_proxy.utils.errors import ConfigurationError


class Settings(BaseSettings):
    """Search proxy settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    # === Spotify ===
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    spotify_api_base_url: str = "https://api.spotify.com/v1"
    http_timeout: float = 10.0

    # === Cache ===
    # Empty REDIS_URL = use the in-process cache (single worker only).
    redis_url: str = ""
    cache_default_ttl: int = 86400
    cache_operation_timeout: float = 5.0
    cache_max_entries: int = 10000

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = Field(default=1323, validation_alias=AliasChoices("port", "app_port"))
    app_env: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"
    disable_middleware: bool = False

    @property
    def json_logs(self) -> bool:
        return self.log_format.lower() == "json" or self.app_env == "production"

    def validate_spotify_credentials(self) -> None:
        """Raise ``ConfigurationError`` unless both Spotify values are set."""
        missing = [
            name
            for name, value in (
                ("SPOTIFY_CLIENT_ID", self.spotify_client_id),
                ("SPOTIFY_CLIENT_SECRET", self.spotify_client_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                message=f"Missing required settings: {', '.join(missing)}",
                provider_name="spotify",
            )
