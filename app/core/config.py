"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY (session token signing) is validated at
load time; Firebase credentials are optional so the app can start
without them (document and account routes then answer 503).
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "poi-authz"
    app_version: str = "1.0.0"
    debug: bool = False

    # Session tokens (claim bundles issued by ClaimCodec)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    session_token_expire_minutes: int = 60

    # Firebase: use key (env) or path (file). Same credentials serve Firestore
    # and the Identity Toolkit admin API.
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firestore_request_timeout_seconds: float = 30.0
    identity_request_timeout_seconds: float = 30.0

    # Business operators sign in with a username; the identity provider needs an
    # email-shaped identifier, synthesized as <username>@<operator_login_domain>.
    operator_login_domain: str = "operators.poi-directory.app"

    # Bootstrap handler: wait this long before re-checking for a concurrent claim.
    bootstrap_recheck_delay_seconds: float = 1.5

    # Account-created hook: if unset, POST /hooks/account-created answers 503.
    # Callers must send X-Webhook-Signature-256: sha256=<hex(hmac_sha256(secret, body))>.
    account_hook_secret: SecretStr | None = None

    # CORS (admin console, business portal, public app)
    allowed_origins: str = "http://localhost:5173,http://localhost:5174,http://localhost:5175"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required secrets and numeric ranges."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.bootstrap_recheck_delay_seconds < 0:
            raise ValueError("BOOTSTRAP_RECHECK_DELAY_SECONDS must be >= 0")
        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"telemetry_exporter must be 'console', 'otlp' or 'none', got: {self.telemetry_exporter!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
