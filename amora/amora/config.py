"""Configuration for amora."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from vendorkit import ProviderConfig

logger = logging.getLogger(__name__)


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", key, raw, default)
        return default


def _optional_seconds(
    env: Mapping[str, str], key: str, default: float | None
) -> float | None:
    """Seconds from *key*; a non-positive value disables the ceiling."""
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", key, raw, default)
        return default
    return value if value > 0 else None


@dataclass(frozen=True)
class Config:
    """Runtime configuration, populated from environment variables."""

    providers: ProviderConfig = field(default_factory=ProviderConfig)
    history_window: int = 8
    chat_deadline_s: float | None = 45.0
    image_deadline_s: float | None = 120.0
    base_delay_ms: int = 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        env = os.environ if environ is None else environ
        return cls(
            providers=ProviderConfig.from_env(env),
            history_window=_int(env, "AMORA_HISTORY_WINDOW", cls.history_window),
            chat_deadline_s=_optional_seconds(
                env, "AMORA_CHAT_DEADLINE", cls.chat_deadline_s
            ),
            image_deadline_s=_optional_seconds(
                env, "AMORA_IMAGE_DEADLINE", cls.image_deadline_s
            ),
            base_delay_ms=_int(env, "AMORA_BASE_DELAY_MS", cls.base_delay_ms),
        )
