from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_ANALYSIS_TABLE = "analysis_history"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class MissingConfigurationError(RuntimeError):
    """Raised when the Supabase project URL or key is not configured."""


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    cors_origins: tuple[str, ...] = ("*",)
    analysis_table: str = DEFAULT_ANALYSIS_TABLE
    log_level: str = "INFO"

    @property
    def has_backend(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def require_backend(self) -> None:
        if not self.has_backend:
            raise MissingConfigurationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be configured on the backend."
            )


def _parse_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return origins or ("*",)


def load_settings(env_file: Path | None = None) -> Settings:
    """Read settings from the environment, after loading ``.env`` if present.

    Values already in the environment win over the file.
    """
    for path in (env_file, _PROJECT_ROOT / ".env", Path.cwd() / ".env"):
        if path is not None and path.is_file():
            load_dotenv(path, override=False)
            break

    return Settings(
        supabase_url=(os.getenv("SUPABASE_URL") or "").strip(),
        supabase_key=(os.getenv("SUPABASE_ANON_KEY") or "").strip(),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "*")),
        analysis_table=(os.getenv("ANALYSIS_TABLE") or DEFAULT_ANALYSIS_TABLE).strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=DEFAULT_LOG_FORMAT)
