"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Elixhauser Composite Score Service"
    debug: bool = False
    log_level: str = "INFO"

    # Scoring defaults for API requests that omit them
    default_method: str = "van_walraven"
    default_include_cardiac_arrhythmia: bool = False

    # API
    api_v1_prefix: str = "/api/v1"


settings = Settings()
