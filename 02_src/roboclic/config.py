"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "roboclic.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} environment variable not set")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""

    bot_token: str
    admin_token: str
    database_url: str | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    api_host: str = "localhost"
    api_port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call load_dotenv first)."""
        return cls(
            bot_token=_require("BOT_TOKEN"),
            admin_token=_require("ADMIN_TOKEN"),
            database_url=os.getenv("DATABASE_URL") or None,
            webhook_url=os.getenv("WEBHOOK_URL") or None,
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
