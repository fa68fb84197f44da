"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cross-field rules are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roles_service.domain.enums import RoleNameMatch


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every setting has a default so the service can start without a
    Firestore key (store-backed routes then answer 503).
    """

    # App
    app_name: str = "roles-service"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Peer services (request/response RPC over HTTP)
    permissions_service_url: str = "http://localhost:3001"
    users_service_url: str = "http://localhost:3002"
    # None = no timeout; a timed-out call fails the request, it is never retried.
    rpc_timeout_seconds: float | None = None

    # Roles
    role_name_match: RoleNameMatch = RoleNameMatch.PREFIX
    default_page_limit: int = 10
    enable_role_deletion: bool = False

    # Caller context forwarded by the gateway
    tenant_header_name: str = "X-Tenant-ID"
    user_header_name: str = "X-User-ID"
    timezone_header_name: str = "X-Timezone"
    request_id_header: str = "X-Request-ID"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"
    telemetry_excluded_urls: str = "/api/v1/health,/docs,/openapi.json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject settings that would break pagination or RPC calls."""
        if self.default_page_limit < 1:
            raise ValueError(
                f"default_page_limit must be a positive integer, got: {self.default_page_limit}"
            )
        if self.rpc_timeout_seconds is not None and self.rpc_timeout_seconds <= 0:
            raise ValueError(
                "rpc_timeout_seconds must be positive when set. "
                "Leave RPC_TIMEOUT_SECONDS unset for no timeout."
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("telemetry_sample_rate must be between 0.0 and 1.0")
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
