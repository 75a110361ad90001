"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./yen_tracker.db"

    # External Services
    rate_api_base: str = "https://api.frankfurter.dev/v1"

    # Service
    service_name: str = "yen-tracker"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Projections
    rate_history_days: int = 365
    strategy_comparison_months: int = 12
    nisa_projection_years: int = 20

    # Alerts
    alert_history_limit: int = 20


settings = Settings()
