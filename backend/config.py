"""
Application settings loaded from the environment (+ optional .env file).
Build one Settings object at startup and pass it to the store, the
generator and the app factory.
"""
import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

PLACEHOLDER_API_KEY = "your-api-key-here"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    database_path: str = "todo.db"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5"
    generation_timeout: float = 30.0
    generation_max_retries: int = 0
    generation_max_tokens: int = 1024
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @property
    def has_api_key(self) -> bool:
        return bool(self.anthropic_api_key) and self.anthropic_api_key != PLACEHOLDER_API_KEY

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            database_path=os.getenv("TODO_DATABASE_PATH", "todo.db"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", "").strip(),
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5").strip(),
            generation_timeout=_env_float("GENERATION_TIMEOUT", 30.0),
            generation_max_retries=_env_int("GENERATION_MAX_RETRIES", 0),
            generation_max_tokens=_env_int("GENERATION_MAX_TOKENS", 1024),
            cors_origins=_env_list("CORS_ORIGINS", ["http://localhost:3000"]),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
