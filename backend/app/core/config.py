# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    # Auth
    secret_key: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        description="Secret used to sign access tokens",
    )
    refresh_secret_key: SecretStr = Field(
        default=SecretStr("change-me-refresh-secret"),
        description="Secret used to sign refresh tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Database
    database_url: str = Field(
        default="sqlite:///./courtside.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    is_testing: bool = False  # Set to True when running tests
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Frontend / CORS
    frontend_url: str = "http://localhost:4200"
    cors_origins: str = "http://localhost:4200,http://localhost:3000"

    # PayPal
    paypal_client_id: Optional[str] = None
    paypal_client_secret: Optional[SecretStr] = None
    paypal_mode: Literal["sandbox", "live"] = "sandbox"
    paypal_timeout_seconds: float = 30.0
    payment_currency: str = "USD"

    # Email
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        description="Email provider to use (console for local development)",
    )
    resend_api_key: Optional[str] = None
    from_email: str = f"{BRAND_NAME} <hello@courtside.app>"

    # Background jobs
    redis_url: str = "redis://localhost:6379"
    celery_broker_url: Optional[str] = None

    # Real-time message delivery; "memory://" works for a single worker only
    broadcast_url: str = "memory://"
    sse_ping_seconds: int = Field(default=15, ge=1)

    # Booking rules
    max_pending_bookings: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        """Refuse to boot production with the placeholder signing secret."""
        if self.environment == "production" and self.secret_key.get_secret_value().startswith(
            "change-me"
        ):
            raise ValueError("SECRET_KEY must be set in production environments.")
        return self

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def paypal_base_url(self) -> str:
        if self.paypal_mode == "sandbox":
            return "https://api-m.sandbox.paypal.com"
        return "https://api-m.paypal.com"

    @property
    def broker_url(self) -> str:
        return self.celery_broker_url or self.redis_url


settings = Settings()
