from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Execution marker: "dev" bypasses trigger authorization
    ENV: Literal["dev", "prod"] = "prod"

    # Database
    DATABASE_URL: str

    # Trigger credentials (bearer tokens)
    CRON_SECRET: str | None = None
    SERVICE_ROLE_KEY: str | None = None

    # Upstream credentials
    FINNHUB_API_KEY: str | None = None
    WATTTIME_USERNAME: str | None = None
    WATTTIME_PASSWORD: str | None = None
    WHALE_ALERT_API_KEY: str | None = None
    FRED_API_KEY: str | None = None

    # Outbound HTTP
    HTTP_MAX_RETRIES: int = 2  # 3 attempts in total
    HTTP_RETRY_DELAY_SECONDS: float = 1.0
    HTTP_USER_AGENT: str = "SituationSync/1.0 (contact@situation-monitor.app)"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    SLACK_WEBHOOK_URL: str | None = None

    # App
    RUN_MIGRATIONS_ON_STARTUP: bool = True
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def auth_bypassed(self) -> bool:
        """Trigger authorization is skipped only with the explicit dev marker."""
        return self.is_development

    @property
    def accepted_tokens(self) -> set[str]:
        """Bearer tokens allowed to trigger a sync."""
        return {token for token in (self.CRON_SECRET, self.SERVICE_ROLE_KEY) if token}

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development


settings = Settings()
