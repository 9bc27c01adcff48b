"""
Favorite Places — Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the stores, and the client package.
When:  Loaded once at module import time; paths are checked at startup.

Both sides read from the same Settings class: the server uses the data and
CORS groups, the client uses the `api_base_url` / `client_timeout` group.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that match a local development checkout
    (data files under ./data, API on port 3000).
    """

    # ── Data Documents ────────────────────────────────────────────────────
    # What: Directory holding the two JSON documents
    data_dir: str = Field(default="./data")

    # Read-only catalog of all places
    places_file: str = Field(default="places.json")

    # Mutable favorites of the single user; rewritten whole on every change
    user_places_file: str = Field(default="user-places.json")

    # What: Directory with place images served at the site root
    # Mounted only when it exists
    images_dir: str = Field(default="./images")

    # What: Artificial latency before GET /places answers
    # Set to 3 to see the loading state in a client
    places_delay_seconds: float = Field(default=0.0, ge=0.0, le=30.0)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated values (parsed by the *_list properties below)
    cors_origins: str = Field(default="*")
    cors_methods: str = Field(default="GET, PUT, DELETE")
    cors_headers: str = Field(default="Content-Type")

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    @property
    def cors_methods_list(self) -> List[str]:
        return _split_csv(self.cors_methods)

    @property
    def cors_headers_list(self) -> List[str]:
        return _split_csv(self.cors_headers)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Client ────────────────────────────────────────────────────────────
    # What: Where the client transport sends its requests
    api_base_url: str = Field(default="http://localhost:3000")

    # Seconds before a single request is abandoned (surfaced as NetworkError)
    client_timeout: float = Field(default=10.0, gt=0.0, le=120.0)

    # What: Run each optimistic mutation to completion before the next starts
    # False restores fully overlapping mutations
    serialize_mutations: bool = Field(default=True)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def places_path(self) -> Path:
        return Path(self.data_dir) / self.places_file

    @property
    def user_places_path(self) -> Path:
        return Path(self.data_dir) / self.user_places_file

    def validate_paths(self) -> None:
        """
        What:  Checks that the catalog document is where the settings say.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not Path(self.data_dir).is_dir():
            errors.append(f"DATA_DIR '{self.data_dir}' does not exist or is not a directory.")
        elif not self.places_path.is_file():
            errors.append(
                f"Catalog document '{self.places_path}' is missing. "
                "GET /places will answer 503 until it is created."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Singleton instance, imported throughout the application
settings = Settings()
