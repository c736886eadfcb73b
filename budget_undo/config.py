"""Application configuration"""
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


HISTORY_FILE_NAME = ".budget-undo-history.json"


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    APP_NAME: str = "Budget Undo"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    
    # Remote budgeting API
    YNAB_API_TOKEN: str = ""
    YNAB_BASE_URL: str = "https://api.ynab.com/v1"
    YNAB_TIMEOUT_SECONDS: float = 10.0
    
    # History
    HISTORY_FILE: Path | None = None
    HISTORY_MAX_ENTRIES: int = 100
    
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


def default_history_path(env: Mapping[str, str] | None = None) -> Path:
    """Dotfile in the user's home directory (HOME, then USERPROFILE, then cwd)."""
    if env is None:
        env = os.environ
    home = env.get("HOME") or env.get("USERPROFILE") or "."
    return Path(home) / HISTORY_FILE_NAME


def resolve_history_path(
    config: Settings,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Configured history file, or the default one."""
    if config.HISTORY_FILE is not None:
        return config.HISTORY_FILE
    return default_history_path(env)


settings = Settings()
