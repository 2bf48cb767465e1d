"""Base provider interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

import httpx

from amora.errors import ConfigurationMissing, ProviderError
from amora.models import GenerationRequest, ImagePrompt
from amora.normalizers import NormalizedResponse
from amora.prompts import PromptBuilder
from vendorkit import ProviderConfig, ProviderInfo


class BaseProvider(ABC):
    """Common plumbing: credentials, model choice, response unwrapping."""

    info: ClassVar[ProviderInfo]

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def model(self) -> str:
        return self._config.model_for(self.info)

    @property
    def timeout_s(self) -> float:
        return self.info.timeout_ms / 1000

    def ensure_configured(self) -> None:
        """Raise ``ConfigurationMissing`` when any credential is absent."""
        missing = self._config.missing_keys(self.info)
        if missing:
            raise ConfigurationMissing(self.name, missing)

    def _credential(self, key: str) -> str:
        value = self._config.credential(key)
        if value is None:
            raise ConfigurationMissing(self.name, [key])
        return value

    def _unwrap(self, normalized: NormalizedResponse) -> str:
        if not normalized.ok or normalized.text is None:
            raise ProviderError(self.name, normalized.error or "empty response")
        return normalized.text


class TextProvider(BaseProvider):
    """A vendor that turns a conversation into a reply."""

    @abstractmethod
    async def complete(self, request: GenerationRequest, builder: PromptBuilder) -> str:
        """Return the generated reply text."""
        ...


class ImageProvider(BaseProvider):
    """A vendor that turns a portrait prompt into an image URL."""

    @abstractmethod
    async def render(self, prompt: ImagePrompt) -> str:
        """Return an image URL or ``data:`` URL."""
        ...
