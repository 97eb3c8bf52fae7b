"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class UnansweredPolicy(str, Enum):
    """What to do with an unanswered call from a number the CRM does not know."""

    create = "create"
    ignore = "ignore"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # Monitoring
    SENTRY_DSN: str = ""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # 3C call source
    THREEC_API_TOKEN: str = ""
    THREEC_BASE_URL: str = "https://3c.fluxoti.com/api/v1"
    THREEC_VERIFY_TLS: bool = True

    # HubSpot CRM
    HUBSPOT_TOKEN: str = ""
    HUBSPOT_BASE_URL: str = "https://api.hubapi.com"

    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Sync cycle
    SYNC_ENABLED: bool = True
    POLL_INTERVAL_SECONDS: float = 60.0
    PAGE_SIZE: int = 100
    MAX_PAGES: int = 50
    WRITE_PACING_SECONDS: float = 0.3
    TIMEZONE: str = "America/Sao_Paulo"

    # Outcome labels and CRM sentinels
    PLACEHOLDER_NAME: str = "Lead 3C"
    DEFAULT_STATUS_LABEL: str = "Sem tabulação"
    NOT_ANSWERED_LABEL: str = "Não atendida"
    VOICEMAIL_LABELS: list[str] = ["Caixa Postal", "Caixa postal", "Secretária Eletrônica"]
    UNANSWERED_NEW_CONTACT_POLICY: UnansweredPolicy = UnansweredPolicy.create

    def missing_credentials(self) -> list[str]:
        """Return the names of remote API tokens that are not configured."""
        missing = []
        if not self.THREEC_API_TOKEN:
            missing.append("THREEC_API_TOKEN")
        if not self.HUBSPOT_TOKEN:
            missing.append("HUBSPOT_TOKEN")
        return missing


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
