"""
Configuration for Repair Shop Manager
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment / .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_title: str = Field(default="Repair Shop Manager")
    api_version: str = Field(default="0.1.0")
    api_key: Optional[str] = Field(
        default=None,
        description="If set, every /api/v1 request must carry it in X-API-Key"
    )

    # Record store
    storage_backend: str = Field(
        default="file",
        description="Record store backend: file, redis or memory"
    )
    data_dir: str = Field(default="./data", description="Directory for the file backend")

    # Redis
    redis_host: str = Field(default="localhost")
    redis_port: int = Field(default=6379)
    redis_password: Optional[str] = Field(default=None)
    redis_db: int = Field(default=0)
    redis_key_prefix: str = Field(default="repair_shop:")

    # Telegram
    telegram_api_base: str = Field(default="https://api.telegram.org")
    telegram_timeout: float = Field(default=15.0)

    # QR / deep links
    deep_link_scheme: str = Field(default="itservice")

    # Secrets at rest (bot token)
    encryption_master_key: Optional[str] = Field(
        default=None,
        description="Master key for encrypting the Telegram bot token in stored settings"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @property
    def redis_url(self) -> str:
        """Redis URL"""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


settings = Settings()
