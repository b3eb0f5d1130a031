"""
NutriTrack Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading, validated once at import so a
       bad value fails at startup instead of in the middle of a request.
How:   Pydantic Settings reads from environment variables (or a .env file)
       and exposes a module-level `settings` object.
Who:   Imported by the store bootstrap, the app factory and the routes.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults target a production deployment; local work usually sets
    ENVIRONMENT=development (stack traces in 500 responses) and either a
    service-account key file or FIRESTORE_EMULATOR_HOST.
    """

    # ── Runtime ───────────────────────────────────────────────────────────
    # What: Deployment mode. Only "development" exposes stack traces in
    # error responses; anything that reaches users should run "production".
    environment: str = Field(default="production")

    log_level: str = Field(default="INFO")

    # ── Firestore ─────────────────────────────────────────────────────────
    # What: GCP project hosting the Firestore database.
    # None lets the client infer it from the key file or the environment.
    google_cloud_project: Optional[str] = Field(default=None)

    firestore_database: str = Field(default="(default)")

    # What: Service-account key used to authenticate against Firestore.
    # When the file does not exist the client falls back to Application
    # Default Credentials (or the emulator if FIRESTORE_EMULATOR_HOST is set).
    firebase_credentials_path: Optional[str] = Field(default="firebase-key.json")

    # ── HTTP ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=3000, ge=1, le=65535)

    # What: Page size used by the /limit history routes when the client
    # does not send one.
    default_page_size: int = Field(default=20, ge=1, le=500)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Restricts the deployment mode to the two supported values."""
        lower = v.strip().lower()
        if lower not in {"development", "production"}:
            raise ValueError(
                f"Invalid environment '{v}'. Must be 'development' or 'production'"
            )
        return lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
