from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"  # Options: "development", "test", "production"
    debug: bool = True

    # Application
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"
    base_url: str = "http://127.0.0.1:8000"
    redirect_status_code: int = 302

    # Access/create telemetry
    disable_bot_access_log: bool = False
    trust_forwarded_for: bool = True  # Honor X-Forwarded-For for the client IP
    display_locale: str = "en"  # Locale for country display names

    # Analytics sink settings
    analytics_backend: str = "memory"  # Options: "memory", "sqlite", "clickhouse"
    analytics_sqlite_path: str = "analytics.db"
    analytics_clickhouse_url: str = "http://localhost:8123"
    analytics_clickhouse_table: str = "shortlink.data_points"

    # Link store settings
    link_store_backend: str = "redis"  # Options: "redis", "memory"
    redis_url: str = "redis://localhost:6379/0"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """Settings dependency (overridable in tests)"""
    return settings
