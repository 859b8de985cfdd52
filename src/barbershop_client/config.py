"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_DEFAULT_HOST = "http://192.168.1.103:3000"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    api_base_url: str = f"{_DEFAULT_HOST}/api"
    auth_base_url: str = _DEFAULT_HOST
    services_base_url: str = _DEFAULT_HOST
    barbers_base_url: str = _DEFAULT_HOST
    bookings_base_url: str = _DEFAULT_HOST
    session_dir: str = ".barbershop_sessions"
    client_origin: str = "http://localhost:5173"
    request_timeout_seconds: float = 15
    analytics_timeout_seconds: float = 5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
