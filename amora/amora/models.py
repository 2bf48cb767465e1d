"""Core data models for amora."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class CharacterProfile(BaseModel, frozen=True):
    """Read-only projection of a companion character."""

    # Identity
    name: str = "your companion"
    gender: str = "nonbinary"

    # Appearance
    height: str | None = None
    build: str | None = None
    eye_color: str | None = None
    hair_color: str | None = None
    skin_tone: str | None = None
    art_style: str = "anime"

    # Personality
    personality_traits: list[str] = Field(default_factory=list)
    backstory: str | None = None
    meet_cute: str | None = None

    @field_validator("personality_traits")
    @classmethod
    def _normalise_traits(cls, value: list[str]) -> list[str]:
        return [t.strip().lower() for t in value if t and t.strip()]

    @property
    def traits(self) -> tuple[str, ...]:
        return tuple(self.personality_traits)


class ConversationTurn(BaseModel, frozen=True):
    """One chronological chat message."""

    role: Literal["user", "assistant"]
    content: str


class GenerationRequest(BaseModel, frozen=True):
    """A new user message plus the character and conversation it belongs to."""

    message: str
    profile: CharacterProfile = Field(default_factory=CharacterProfile)
    history: list[ConversationTurn] = Field(default_factory=list)

    def window(self, size: int) -> list[ConversationTurn]:
        """Return the last *size* turns; older history is dropped."""
        if size <= 0:
            return []
        return list(self.history[-size:])


class ProviderLayer(str, Enum):
    """Which tier of the fallback chain produced a result."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    LOCAL = "local"


class GenerationResult(BaseModel, frozen=True):
    """Outcome of one text generation call."""

    content: str = Field(min_length=1)
    provider_used: ProviderLayer
    provider_name: str
    used_fallback: bool
    fallback_reason: str | None = None
    latency_ms: int = 0


class ImageGenerationRequest(BaseModel, frozen=True):
    """Character attributes for a portrait."""

    profile: CharacterProfile


class ImagePrompt(BaseModel, frozen=True):
    """Provider-ready portrait prompt."""

    prompt: str
    negative_prompt: str | None = None
    style: str
    width: int = 512
    height: int = 512


class ImageGenerationResult(BaseModel, frozen=True):
    """Outcome of one portrait generation call."""

    image_url: str = Field(min_length=1)
    is_placeholder: bool
    provider_name: str
    gender: str
    art_style: str
    prompt: str
    negative_prompt: str | None = None
    fallback_reason: str | None = None
    latency_ms: int = 0
