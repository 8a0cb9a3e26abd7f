"""Relay Service — configuration loaded once from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"


@dataclass(frozen=True)
class RelayConfig:
    openai_api_key: Optional[str]
    assistant_id: Optional[str]
    transcribe_model: str = DEFAULT_TRANSCRIBE_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: Optional[float] = None  # None = no client-side timeout
    poll_interval_seconds: float = 1.0
    poll_max_attempts: Optional[int] = None  # None = poll until terminal
    upload_dir: str = "uploads"
    port: int = 3000


def _read_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if not value:
        return None
    stripped = value.strip()
    return stripped or None


def _read_float_env(name: str, default: Optional[float]) -> Optional[float]:
    value = _read_optional_env(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_int_env(name: str, default: Optional[int]) -> Optional[int]:
    value = _read_optional_env(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_config() -> RelayConfig:
    return RelayConfig(
        openai_api_key=_read_optional_env("OPENAI_API_KEY"),
        assistant_id=_read_optional_env("ASSISTANT_ID"),
        transcribe_model=_read_optional_env("TRANSCRIBE_MODEL") or DEFAULT_TRANSCRIBE_MODEL,
        base_url=(_read_optional_env("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        timeout_seconds=_read_float_env("OPENAI_TIMEOUT_SECONDS", None) or None,
        poll_interval_seconds=_read_float_env("RUN_POLL_INTERVAL_SECONDS", 1.0),
        poll_max_attempts=_read_int_env("RUN_POLL_MAX_ATTEMPTS", None),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        port=_read_int_env("PORT", 3000),
    )
