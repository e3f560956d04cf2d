"""Application configuration managed via environment variables."""
from datetime import time
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LUNITE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Lunite Planner"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./lunite.db"
    default_wake_time: time = time(6, 0)
    default_bed_time: time = time(22, 0)
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "lunite"
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    rollover_hour: int = 0
    rollover_minute: int = 5
    jobs_run_on_startup: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
