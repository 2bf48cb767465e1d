"""Primary text provider: chat completion through litellm."""

from __future__ import annotations

import logging
from typing import Any

import litellm

from amora.errors import ProviderError, ProviderTimeout
from amora.models import GenerationRequest
from amora.normalizers import normalize_chat_completion
from amora.prompts import PromptBuilder
from amora.providers.base import TextProvider
from vendorkit import PROVIDERS

logger = logging.getLogger(__name__)


class OpenAIChatProvider(TextProvider):
    """Chat completion with the character's system prompt and recent window."""

    info = PROVIDERS["openai"]

    def _completion_kwargs(
        self, request: GenerationRequest, builder: PromptBuilder
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "api_key": self._credential("OPENAI_API_KEY"),
            "messages": builder.build_messages(request),
            "temperature": 0.8,
            "max_tokens": 300,
            "timeout": self.timeout_s,
            # retries are owned by RetryableCall
            "num_retries": 0,
        }
        if self.info.endpoint:
            kwargs["api_base"] = self.info.endpoint
        return kwargs

    async def complete(self, request: GenerationRequest, builder: PromptBuilder) -> str:
        kwargs = self._completion_kwargs(request, builder)
        try:
            response = await litellm.acompletion(**kwargs)
        except litellm.Timeout as exc:
            raise ProviderTimeout(self.name, self.info.timeout_ms) from exc
        except Exception as exc:
            raise ProviderError(
                self.name,
                f"{type(exc).__name__}: {exc}",
                status_code=getattr(exc, "status_code", None),
            ) from exc
        return self._unwrap(normalize_chat_completion(response))
