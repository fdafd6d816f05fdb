"""Kong publisher — environment-based configuration.

Values are loaded from environment variables and .env files.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class KongPublisherSettings(BaseSettings):
    """Settings for the publish command."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── General ───────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"
    service_name: str = "kong_publisher"

    # ── Kong admin API ────────────────────────
    kong_url: str = "http://localhost"
    kong_port: int = 8001
    kong_timeout: float = 10.0

    # ── Application ───────────────────────────
    # Base URL the gateway forwards to (upstream_url prefix)
    app_url: str = "http://localhost"
    log_dir: str = "storage/logs"

    @property
    def kong_admin_url(self) -> str:
        return f"{self.kong_url.rstrip('/')}:{self.kong_port}"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def json_logs(self) -> bool:
        return self.is_production


def get_settings() -> KongPublisherSettings:
    return KongPublisherSettings()
