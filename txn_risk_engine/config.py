"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "txn-risk-engine"
    log_level: str = "INFO"

    # Upload limits
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB

    # Result shaping
    suspicious_list_limit: int = 50
    top_merchants_limit: int = 5


settings = Settings()
