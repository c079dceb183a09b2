from __future__ import annotations

import logging
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

QUESTION_TYPES = ("text", "multiple", "checkbox")
CHOICE_TYPES = {"multiple", "checkbox"}
THEMES = ("light", "dark")


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.storage_backend = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.sqlite_path = Path(os.getenv("SQLITE_PATH", "./data/formify.db"))
        self.json_path = Path(os.getenv("JSON_PATH", "./data/formify.json"))
        self.supabase_url = os.getenv("SUPABASE_URL", "")
        # service role key wins over the anon key for server-side calls
        self.supabase_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv(
            "SUPABASE_KEY", ""
        )
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")
        theme = os.getenv("DEFAULT_THEME", "light").lower()
        self.default_theme = theme if theme in THEMES else "light"
        self.timezone = os.getenv("TIMEZONE", "UTC")
        self.date_format = os.getenv("DATE_FORMAT", "%m/%d/%Y")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _int_env("PORT", 8000)


def ensure_dirs(settings: Settings) -> None:
    if settings.storage_backend == "sqlite":
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    elif settings.storage_backend == "json":
        settings.json_path.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
