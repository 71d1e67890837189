"""
Portfolio Contact API Configuration
Central configuration management using Pydantic Settings
"""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application =====
    app_name: str = "Portfolio Contact API"
    app_version: str = "1.0.0"
    environment: str = "development"
    # SECURITY: Debug mode disabled by default - enable explicitly in .env for development
    debug: bool = False
    # Render logs as JSON lines (production) instead of the console renderer
    log_json: bool = False

    # ===== Site / CORS =====
    # Public site URL - used in the email footer and as the CORS origin
    site_url: Optional[str] = "http://localhost:3000"
    # Extra allowed origins (comma-separated), added to site_url
    cors_origins: str = ""
    # Trust X-Forwarded-For / X-Real-IP from the hosting proxy
    trust_proxy_headers: bool = True

    # ===== Email (Resend) =====
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    contact_email: str = "psykingko@gmail.com"
    from_email: str = "onboarding@resend.dev"
    from_name: str = "Portfolio Contact"
    email_timeout_seconds: float = 10.0
    # 1 = single authoritative attempt; >1 retries transport failures only
    email_max_attempts: int = 1

    # ===== Rate Limiting =====
    rate_limit_enabled: bool = True  # Set to False to disable rate limiting
    rate_limit_backend: str = "memory"  # "memory" or "redis"

    # Contact endpoint - 5 requests per 15 minutes per client
    rate_limit_contact_requests: int = 5
    rate_limit_contact_window: int = 900

    # ===== Redis =====
    redis_url: str = "redis://localhost:6379/0"

    # ===== Sentry Error Tracking =====
    sentry_dsn: Optional[str] = None
    sentry_environment: Optional[str] = None  # Falls back to environment if not set
    sentry_traces_sample_rate: float = 0.1

    @property
    def allowed_origins(self) -> list[str]:
        """Site URL plus any extra CORS origins, de-duplicated in order."""
        origins = [self.site_url] if self.site_url else []
        for origin in self.cors_origins.split(","):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    @property
    def cors_allow_origins(self) -> list[str]:
        """Origins for the CORS middleware; any origin when none is configured."""
        return self.allowed_origins or ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
