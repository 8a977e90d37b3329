"""
Tutor configuration

Settings come from the environment (a local .env file is loaded first).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_STATE_DIR = "~/.sparck_tutor"
DEFAULT_STORAGE_KEY = "ai_sparck_state_v1"
DEFAULT_TYPING_DELAY_MS = 450
DEFAULT_LOG_LEVEL = "INFO"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] {name}={raw!r} is not an integer, using {default}")
        return default
    if value < 0:
        logger.warning(f"⚠️ [Config] {name}={raw!r} is negative, using {default}")
        return default
    return value


@dataclass(frozen=True)
class TutorSettings:
    """Runtime settings for the tutor."""
    state_dir: Path = Path(DEFAULT_STATE_DIR).expanduser()
    storage_key: str = DEFAULT_STORAGE_KEY
    typing_delay_ms: int = DEFAULT_TYPING_DELAY_MS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def typing_delay(self) -> float:
        """Typing delay in seconds."""
        return self.typing_delay_ms / 1000.0

    @property
    def log_level_number(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def from_env(cls) -> "TutorSettings":
        """Read settings from SPARCK_* environment variables."""
        return cls(
            state_dir=Path(os.getenv("SPARCK_STATE_DIR", DEFAULT_STATE_DIR)).expanduser(),
            storage_key=os.getenv("SPARCK_STORAGE_KEY", DEFAULT_STORAGE_KEY) or DEFAULT_STORAGE_KEY,
            typing_delay_ms=_int_from_env("SPARCK_TYPING_DELAY_MS", DEFAULT_TYPING_DELAY_MS),
            log_level=os.getenv("SPARCK_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
