"""Runtime configuration read from ``OLLAMA_PROMPT_*`` environment variables.

Kept free of side effects so it can be imported from the CLI, the Gradio
form and the FastAPI app alike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional
import os

from .models import DEFAULT_HOST, DEFAULT_PORT


def _parse_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _parse_timeout(value: str | None) -> Optional[float]:
    if value is None or not value.strip():
        return None
    timeout = float(value)
    return timeout if timeout > 0 else None


def _split_csv(value: str | None) -> List[str]:
    if not value:
        return []
    parts = [p.strip() for p in value.split(",") if p.strip()]
    return parts


@dataclass
class ServiceSettings:
    """Defaults for the form plus bind addresses for the API and UI servers."""

    default_host: str = DEFAULT_HOST
    default_port: str = DEFAULT_PORT
    request_timeout: Optional[float] = None
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: List[str] = field(default_factory=list)
    ui_host: str = "127.0.0.1"
    ui_port: int = 7860
    readiness_check_llm: bool = False
    log_level: str = "INFO"

    @property
    def default_generate_url(self) -> str:
        return f"http://{self.default_host}:{self.default_port}/api/generate"

    @staticmethod
    def from_env() -> "ServiceSettings":
        settings = ServiceSettings(
            default_host=os.environ.get("OLLAMA_PROMPT_DEFAULT_HOST", DEFAULT_HOST),
            default_port=os.environ.get("OLLAMA_PROMPT_DEFAULT_PORT", DEFAULT_PORT),
            request_timeout=_parse_timeout(
                os.environ.get("OLLAMA_PROMPT_REQUEST_TIMEOUT")
            ),
            api_host=os.environ.get("OLLAMA_PROMPT_API_HOST", "127.0.0.1"),
            api_port=int(os.environ.get("OLLAMA_PROMPT_API_PORT", "8000")),
            cors_origins=_split_csv(os.environ.get("OLLAMA_PROMPT_API_CORS_ORIGINS")),
            ui_host=os.environ.get("OLLAMA_PROMPT_UI_HOST", "127.0.0.1"),
            ui_port=int(os.environ.get("OLLAMA_PROMPT_UI_PORT", "7860")),
            readiness_check_llm=_parse_bool(
                os.environ.get("OLLAMA_PROMPT_READY_CHECK_LLM"), default=False
            ),
            log_level=(os.environ.get("OLLAMA_PROMPT_LOG_LEVEL") or "INFO").upper(),
        )
        return settings


@lru_cache(maxsize=1)
def get_settings() -> ServiceSettings:
    """Return cached service settings."""
    return ServiceSettings.from_env()


def reset_settings_cache() -> None:
    """Reset cached settings (useful in tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
