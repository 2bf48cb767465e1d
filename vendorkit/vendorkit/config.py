"""Vendor credentials and priority orders, resolved once at process start."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from vendorkit.providers import (
    DEFAULT_IMAGE_PRIORITY,
    DEFAULT_TEXT_PRIORITY,
    PROVIDERS,
    ProviderInfo,
)

# Environment variable -> provider whose model it overrides.
_MODEL_OVERRIDES: dict[str, str] = {
    "AMORA_OPENAI_MODEL": "openai",
    "AMORA_HF_TEXT_MODEL": "huggingface",
    "AMORA_HF_IMAGE_MODEL": "huggingface-image",
}


def _parse_priority(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    return tuple(name.strip().lower() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class ProviderConfig:
    """Which vendors are usable, and in which order they are tried.

    Absent credentials are not an error here; the orchestration layer
    skips unconfigured providers at call time.
    """

    credentials: Mapping[str, str] = field(default_factory=dict)
    text_priority: tuple[str, ...] = DEFAULT_TEXT_PRIORITY
    image_priority: tuple[str, ...] = DEFAULT_IMAGE_PRIORITY
    models: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProviderConfig:
        """Build config from credential env keys and AMORA_* overrides."""
        env = os.environ if environ is None else environ

        wanted = {key for info in PROVIDERS.values() for key in info.env_keys}
        credentials = {
            key: env[key].strip()
            for key in sorted(wanted)
            if env.get(key, "").strip()
        }
        models = {
            provider: env[var].strip()
            for var, provider in _MODEL_OVERRIDES.items()
            if env.get(var, "").strip()
        }

        return cls(
            credentials=credentials,
            text_priority=_parse_priority(
                env.get("AMORA_TEXT_PROVIDERS"), DEFAULT_TEXT_PRIORITY
            ),
            image_priority=_parse_priority(
                env.get("AMORA_IMAGE_PROVIDERS"), DEFAULT_IMAGE_PRIORITY
            ),
            models=models,
        )

    def credential(self, key: str) -> str | None:
        """Return the credential stored under *key*, or None."""
        value = self.credentials.get(key, "")
        return value.strip() or None

    def missing_keys(self, info: ProviderInfo) -> list[str]:
        """Return the env keys *info* needs that are not set."""
        return [key for key in info.env_keys if self.credential(key) is None]

    def is_configured(self, info: ProviderInfo) -> bool:
        return not self.missing_keys(info)

    def model_for(self, info: ProviderInfo) -> str:
        """Return the model override for *info*, else its default."""
        return self.models.get(info.name) or info.default_model
