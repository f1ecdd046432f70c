"""Application configuration management using Pydantic's BaseSettings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Literal, Optional

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Defines all configuration settings for the proxy, loaded from .env file."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # OpenRouter
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-3.5-turbo"
    request_timeout_seconds: float = 25.0

    # Attribution headers sent to OpenRouter
    http_referer: str = "https://railway.app"
    app_title: str = "WhatsApp Bot Assistant"

    # App settings
    service_name: str = "WhatsApp Bot Proxy"
    debug: bool = False
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def api_key_configured(self) -> bool:
        """True when an OpenRouter key is set and not blank."""
        return bool(self.openrouter_api_key and self.openrouter_api_key.strip())

    class Config:
        """Pydantic model configuration."""

        env_file = ".env"
        extra = "ignore"
        frozen = True


settings = Settings()


def get_settings() -> Settings:
    """Dependency returning the settings loaded at startup."""
    return settings
