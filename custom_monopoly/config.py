"""
Engine configuration loaded from environment variables.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

from shared.game_settings import GameSettings, default_settings, load_settings

load_dotenv()


def _optional_int(value: str | None) -> int | None:
    if value is None or value.strip() == "":
        return None
    return int(value)


class Config:
    """Engine configuration."""

    # Database
    DATABASE_PATH: Path = Path(os.getenv("MONOPOLY_DATABASE_PATH", "./data/custom_monopoly.db"))
    AUTOSAVE: bool = os.getenv("MONOPOLY_AUTOSAVE", "true").lower() in ("1", "true", "yes")

    # Logging
    LOG_LEVEL: str = os.getenv("MONOPOLY_LOG_LEVEL", "INFO").upper()

    # Board and card configuration document
    SETTINGS_PATH: Path | None = (
        Path(os.environ["MONOPOLY_SETTINGS_PATH"])
        if os.getenv("MONOPOLY_SETTINGS_PATH") else None
    )

    # Reproducible dice and card draws
    DICE_SEED: int | None = _optional_int(os.getenv("MONOPOLY_DICE_SEED"))

    @classmethod
    def ensure_directories(cls) -> None:
        """Create necessary directories if they don't exist."""
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load_game_settings(cls) -> GameSettings:
        """Read the configured settings document, or the stock board if none is set."""
        if cls.SETTINGS_PATH is None:
            return default_settings()
        return load_settings(cls.SETTINGS_PATH)


config = Config()
settings = config  # Alias used by the persistence layer
