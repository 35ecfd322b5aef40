from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Any
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"

    # Backend-as-a-service project. Every read and write goes through it.
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    # Only used by trusted server-side flows (payment webhooks).
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Access tokens are minted by the BaaS auth service and signed with the
    # project's JWT secret (provide a fallback for local development).
    SUPABASE_JWT_SECRET: str = "fallback_secret_for_dev_only"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Object storage bucket holding avatars, event covers and artist media
    MEDIA_BUCKET: str = "media"

    # Payment checkout endpoint (edge function) used for paid event publishing
    CHECKOUT_FUNCTION_URL: str = ""
    # Checkout endpoint (edge function) for artist subscription plans
    SUBSCRIPTION_CHECKOUT_FUNCTION_URL: str = ""
    # Shared secret for signed payment webhooks
    PAYMENT_WEBHOOK_SECRET: str = ""
    PAYMENT_WEBHOOK_TOLERANCE_SECONDS: int = 300

    REMOTE_TIMEOUT_SECONDS: float = 10.0

    # Unread badges and conversation lists refresh on this cadence
    POLL_INTERVAL_SECONDS: float = 7.0
    STREAM_HEARTBEAT_SECONDS: float = 20.0

    # CORS origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    CORS_ALLOW_ALL: bool = False

    # Base frontend URL used for redirects and checkout return links
    FRONTEND_URL: str = "http://localhost:5173"

    LOG_LEVEL: str = "INFO"

    # Planners get this many free event publishes before checkout kicks in
    FREE_EVENT_PUBLISHES: int = 1

    # Media limits by entitlement tier
    FREE_TIER_PHOTO_LIMIT: int = 5
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    MAX_VIDEO_BYTES: int = 50 * 1024 * 1024

    # Free Forever plan is capped at this many artists
    FREE_FOREVER_SPOTS: int = 50

    model_config = SettingsConfigDict(extra="ignore", case_sensitive=True)

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("SUPABASE_URL", "FRONTEND_URL", "CHECKOUT_FUNCTION_URL", "SUBSCRIPTION_CHECKOUT_FUNCTION_URL", mode="before")
    def strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @model_validator(mode="after")
    def allow_all_if_requested(self) -> "Settings":
        if self.CORS_ALLOW_ALL:
            self.CORS_ORIGINS = ["*"]
        return self

    @property
    def checkout_url(self) -> str:
        """Checkout endpoint, defaulting to the project's edge function."""
        if self.CHECKOUT_FUNCTION_URL:
            return self.CHECKOUT_FUNCTION_URL
        return f"{self.SUPABASE_URL}/functions/v1/create-checkout-session"

    @property
    def subscription_checkout_url(self) -> str:
        if self.SUBSCRIPTION_CHECKOUT_FUNCTION_URL:
            return self.SUBSCRIPTION_CHECKOUT_FUNCTION_URL
        return f"{self.SUPABASE_URL}/functions/v1/create-subscription-checkout"


def _env_file() -> str:
    return os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env"))


def load_settings() -> "Settings":
    return Settings(_env_file=_env_file())


settings = load_settings()
