"""Vendor registry: endpoints, credentials and call limits for each provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ProviderKind = Literal["text", "image", "voice"]


@dataclass(frozen=True)
class ProviderInfo:
    """Metadata for an external generative vendor."""

    name: str
    kind: ProviderKind
    env_keys: tuple[str, ...]  # every key must be set for the provider to be usable
    endpoint: str | None  # None = use the client library default
    default_model: str
    timeout_ms: int = 15_000
    max_retries: int = 1
    supports_negative_prompt: bool = False


# --- Text generation ---

_OPENAI = ProviderInfo(
    name="openai",
    kind="text",
    env_keys=("OPENAI_API_KEY",),
    endpoint=None,
    default_model="openai/gpt-3.5-turbo",
    timeout_ms=15_000,
    max_retries=1,
)

_HUGGINGFACE = ProviderInfo(
    name="huggingface",
    kind="text",
    env_keys=("HUGGING_FACE_API_KEY",),
    endpoint="https://api-inference.huggingface.co/models",
    default_model="microsoft/DialoGPT-medium",
    timeout_ms=15_000,
    max_retries=1,
)

# --- Image generation (slower, longer timeouts) ---

_HUGGINGFACE_IMAGE = ProviderInfo(
    name="huggingface-image",
    kind="image",
    env_keys=("HUGGING_FACE_API_KEY",),
    endpoint="https://api-inference.huggingface.co/models",
    default_model="runwayml/stable-diffusion-v1-5",
    timeout_ms=20_000,
    max_retries=2,
    supports_negative_prompt=True,
)

_REPLICATE = ProviderInfo(
    name="replicate",
    kind="image",
    env_keys=("REPLICATE_API_KEY",),
    endpoint="https://api.replicate.com/v1/predictions",
    # Stable Diffusion v1.5
    default_model="ac732df83cea7fff18b8472768c88ad041fa750ff7682a21affe81863cbe77e4",
    timeout_ms=30_000,
    max_retries=2,
    supports_negative_prompt=True,
)

_PICA_DALLE = ProviderInfo(
    name="pica-dalle",
    kind="image",
    env_keys=("PICA_SECRET_KEY", "PICA_OPENAI_CONNECTION_KEY"),
    endpoint="https://api.picaos.com/v1/passthrough/images/generations",
    default_model="dall-e-3",
    timeout_ms=30_000,
    max_retries=1,
)

# --- Voice ---

_ELEVENLABS = ProviderInfo(
    name="elevenlabs",
    kind="voice",
    env_keys=("ELEVENLABS_API_KEY",),
    endpoint="https://api.elevenlabs.io/v1",
    default_model="eleven_multilingual_v2",
    timeout_ms=15_000,
    max_retries=0,
)

# --- Registry ---

PROVIDERS: dict[str, ProviderInfo] = {
    p.name: p
    for p in [
        _OPENAI, _HUGGINGFACE,
        _HUGGINGFACE_IMAGE, _REPLICATE, _PICA_DALLE,
        _ELEVENLABS,
    ]
}

DEFAULT_TEXT_PRIORITY: tuple[str, ...] = ("openai", "huggingface")
DEFAULT_IMAGE_PRIORITY: tuple[str, ...] = ("huggingface-image", "replicate", "pica-dalle")


def get_provider(name: str) -> ProviderInfo | None:
    """Look up a provider by name (case-insensitive)."""
    return PROVIDERS.get(name.strip().lower())


def list_providers() -> list[str]:
    """Return all registered provider names."""
    return list(PROVIDERS.keys())


def providers_of_kind(kind: ProviderKind) -> list[ProviderInfo]:
    """Return registered providers of *kind*, in registration order."""
    return [p for p in PROVIDERS.values() if p.kind == kind]
