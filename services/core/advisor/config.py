import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the directory where this config.py file is located
_config_dir = Path(__file__).parent
_env_file = _config_dir.parent / ".env"  # services/core/.env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_env_file),
        env_file_encoding="utf-8",
        env_prefix="ADVISOR_",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    api_title: str = "Strategy Advisor API"

    # Logging
    log_level: str = "INFO"

    # Allow debug=true on requests (full intermediate trace)
    include_debug_trace: bool = True

    def get_log_level(self) -> int:
        """Resolve log_level name to a logging level, INFO if unknown."""
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> Settings:
    return Settings()
