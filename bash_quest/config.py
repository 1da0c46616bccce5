"""Driver settings loaded from environment variables (BASH_QUEST_*)."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the terminal front-end. Gameplay constants live in code."""

    model_config = SettingsConfigDict(
        env_prefix="BASH_QUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Loop
    target_fps: int = 60

    # Fixed seed for reproducible runs; None = system randomness
    seed: Optional[int] = None

    # Logging (the terminal is fullscreen, so logs go to a file or nowhere)
    log_file: Optional[Path] = None
    log_level: str = "DEBUG"

    # Minimum terminal size
    min_width: int = 80
    min_height: int = 24


def get_settings() -> Settings:
    return Settings()
