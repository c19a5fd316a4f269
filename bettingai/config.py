"""
Runtime configuration for the HTTP service and the Telegram bot
"""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEFAULT_PORT = 3000
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _get_env(name: str, *, required: bool = False, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name, default)
    if required and not val:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from None


def _get_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}") from None


def check_log_level(level: str) -> str:
    """Upper-cased level name, or RuntimeError for names logging does not know"""
    name = (level or "").strip().upper()
    if name not in LOG_LEVELS:
        raise RuntimeError(f"Invalid log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
    return name


@dataclass
class Settings:
    """Settings for the service and bot"""

    bot_token: Optional[str] = None
    webapp_url: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    seed: Optional[int] = None
    analyze_delay_min: float = 1.5
    analyze_delay_max: float = 2.5
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"
    environment: str = "development"

    def __post_init__(self):
        """Validate settings"""
        if self.analyze_delay_min < 0 or self.analyze_delay_max < self.analyze_delay_min:
            raise RuntimeError(
                f"Invalid analyze delay range [{self.analyze_delay_min}, {self.analyze_delay_max}]"
            )
        if self.max_upload_bytes <= 0:
            raise RuntimeError("MAX_UPLOAD_BYTES must be positive")
        self.log_level = check_log_level(self.log_level)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Load settings from the environment

        Args:
            dotenv: Read a ``.env`` file first (default: True)
        """
        if dotenv:
            load_dotenv()
        return cls(
            bot_token=_get_env("BOT_TOKEN"),
            webapp_url=_get_env("WEBAPP_URL", default="http://localhost:3000"),
            host=_get_env("HOST", default="0.0.0.0"),
            port=_get_int("PORT", DEFAULT_PORT),
            seed=_get_int("PREDICTION_SEED", None),
            analyze_delay_min=_get_float("ANALYZE_DELAY_MIN", 1.5),
            analyze_delay_max=_get_float("ANALYZE_DELAY_MAX", 2.5),
            max_upload_bytes=_get_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            log_level=_get_env("LOG_LEVEL", default="INFO"),
            environment=_get_env("ENVIRONMENT", default="development"),
        )

    def require_bot_token(self) -> str:
        """Bot token, failing fast when it is not configured"""
        if not self.bot_token:
            raise RuntimeError("Missing required environment variable: BOT_TOKEN")
        return self.bot_token

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging with a single stream handler"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(check_log_level(level))
