# backend/checkup_capacity/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str
    redis_url: str | None = None
    log_level: str = "INFO"

    # Capacity engine
    slot_step_minutes: int = 30
    sentinel_capacity: int = 999
    cache_s_maxage: int = 60
    cache_stale_while_revalidate: int = 600
    template_cache_ttl_seconds: int = 300
    max_range_days: int = 366

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite path -> absolute, anchored at repo root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
