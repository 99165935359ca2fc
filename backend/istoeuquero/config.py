"""
IstoEuQuero Backend: Application Configuration
===============================================

What:  Typed settings for the gateway, loaded with Pydantic Settings.
How:   Reads environment variables (or a .env file) once at process start.
       The resulting `Settings` instance is handed to `create_app()`, which
       passes it to the store client; request handlers never read the
       environment themselves.
Who:   `istoeuquero.main` builds it; the store client and lifespan consume it.

Environment:
    SUPABASE_URL            Base URL of the hosted store (https://<ref>.supabase.co)
    SUPABASE_SERVICE_ROLE   Service credential sent as apikey and bearer token
    PORT                    Listening port (default 10000)

When:  Built once at import of `istoeuquero.main` (module-level `app`). Tests
       build their own with `_env_file=None` and pass it to `create_app()`.

Why:
    Missing store credentials only produce a warning. The liveness routes
    (`/`, `/health`) must keep answering so the host sees the process up,
    while store-backed calls fail with an upstream error until the
    variables are set.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Gateway settings.

    Store credentials default to empty strings: a missing credential is
    reported at startup (see `missing_store_credentials`) but never blocks it.
    """

    # ── External store ────────────────────────────────────────────────────
    supabase_url: str = Field(
        default="",
        description="Base URL of the hosted store, without the /rest/v1 suffix",
    )
    supabase_service_role: str = Field(
        default="",
        description="Service credential for the store's REST interface",
    )

    # Seconds; None waits for the store indefinitely
    store_timeout: Optional[float] = Field(default=None, gt=0)

    users_table: str = Field(default="istoeuquero_users")
    wishlists_table: str = Field(default="istoeuquero_wishlists")
    items_table: str = Field(default="istoeuquero_wishlist_items")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000, ge=1, le=65535)

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

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def missing_store_credentials(self) -> List[str]:
        """
        Names of the store variables that are not configured.

        Called by the lifespan handler, which logs a warning for each one.
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role:
            missing.append("SUPABASE_SERVICE_ROLE")
        return missing
