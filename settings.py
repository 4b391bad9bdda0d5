import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def _optional_float(value: Optional[str]) -> Optional[float]:
    value = (value or "").strip()
    return float(value) if value else None


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base: str = DEFAULT_API_BASE
    gemini_transport: str = "rest"
    gemini_timeout_seconds: Optional[float] = None
    gemini_max_attempts: int = 1
    gemini_retry_backoff_seconds: float = 0.5
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


def get_settings() -> Settings:
    """Read configuration from the environment (and .env) on every call."""
    return Settings(
        gemini_api_key=(os.getenv("GEMINI_API_KEY") or "").strip() or None,
        gemini_model=(os.getenv("GEMINI_MODEL") or DEFAULT_MODEL).strip(),
        gemini_api_base=(os.getenv("GEMINI_API_BASE") or DEFAULT_API_BASE).strip().rstrip("/"),
        gemini_transport=(os.getenv("GEMINI_TRANSPORT") or "rest").strip().lower(),
        gemini_timeout_seconds=_optional_float(os.getenv("GEMINI_TIMEOUT_SECONDS")),
        gemini_max_attempts=max(1, int(os.getenv("GEMINI_MAX_ATTEMPTS", "1"))),
        gemini_retry_backoff_seconds=float(os.getenv("GEMINI_RETRY_BACKOFF_SECONDS", "0.5")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        host=(os.getenv("HOST") or "0.0.0.0").strip(),
        port=int(os.getenv("PORT", "3000")),
    )
