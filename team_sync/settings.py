"""Engine settings read from ``TEAM_SYNC_*`` environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class EngineSettings(BaseModel):
    """Latency, notification and backend switches for the service facade."""

    fetch_latency_ms: int = Field(default=300, ge=0)
    write_latency_ms: int = Field(default=150, ge=0)
    badge_notice_seconds: float = Field(default=4.0, ge=0)
    use_llm: bool = False

    @classmethod
    def from_env(cls) -> EngineSettings:
        """Build settings from the environment.

        Raises:
            ValueError: If a variable is set to an unparsable value.
        """
        settings = cls(
            fetch_latency_ms=_int_env("TEAM_SYNC_FETCH_LATENCY_MS", 300),
            write_latency_ms=_int_env("TEAM_SYNC_WRITE_LATENCY_MS", 150),
            badge_notice_seconds=_float_env("TEAM_SYNC_BADGE_NOTICE_SECONDS", 4.0),
            use_llm=_bool_env("TEAM_SYNC_USE_LLM", False),
        )
        logger.info(
            "Engine settings: fetch=%sms write=%sms notice=%ss llm=%s",
            settings.fetch_latency_ms,
            settings.write_latency_ms,
            settings.badge_notice_seconds,
            settings.use_llm,
        )
        return settings


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")
