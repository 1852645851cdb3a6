"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # HTTP server
    port: int = 3000

    # FACEIT Data API configuration
    faceit_key: str = ""
    faceit_base_url: str = "https://open.faceit.com/data/v4"

    # Log raw upstream payloads (DEBUG_FACEIT=true)
    debug_faceit: bool = False

    # /profile: full lookup with match history, kept short for chat bots
    profile_timeout_seconds: float = 1.5
    profile_cache_ttl_seconds: int = 60

    # /elo: background-refreshed lookup, no history
    elo_timeout_seconds: float = 8.0
    elo_cache_ttl_seconds: int = 30

    # Match history
    history_limit: int = 50

    default_game: str = "cs2"

    # Thread pool size for background cache refreshes
    refresh_workers: int = 4

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
