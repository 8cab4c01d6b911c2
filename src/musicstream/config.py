"""Configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load environment variables
load_dotenv()


def _str_to_bool(val: Optional[str], default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    db_path: str = "musicstream.db"
    app_key: str = ""
    lastfm_api_key: Optional[str] = None
    lastfm_api_secret: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            db_path=os.getenv("MUSICSTREAM_DB_PATH", "musicstream.db"),
            app_key=os.getenv("MUSICSTREAM_APP_KEY", ""),
            lastfm_api_key=os.getenv("LASTFM_API_KEY") or None,
            lastfm_api_secret=os.getenv("LASTFM_API_SECRET") or None,
            host=os.getenv("MUSICSTREAM_HOST", "0.0.0.0"),
            port=int(os.getenv("MUSICSTREAM_PORT", "8000")),
            reload=_str_to_bool(os.getenv("MUSICSTREAM_RELOAD")),
            log_level=os.getenv("MUSICSTREAM_LOG_LEVEL", "INFO").upper(),
        )


def setup_logging(level: str = "INFO") -> None:
    """Send log records through rich."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
