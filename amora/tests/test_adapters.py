"""Tests for vendor adapters (mocked transports, no network)."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import litellm
import pytest

from amora.errors import ConfigurationMissing, ProviderError, ProviderTimeout
from amora.models import CharacterProfile, ConversationTurn, GenerationRequest, ImagePrompt
from amora.prompts import PromptBuilder
from amora.providers import build_image_providers, build_text_providers
from amora.providers.huggingface import HuggingFaceImageProvider, HuggingFaceTextProvider
from amora.providers.openai import OpenAIChatProvider
from amora.providers.pica import PicaDalleImageProvider
from amora.providers.replicate import ReplicateImageProvider
from vendorkit import ProviderConfig

CONFIG = ProviderConfig(
    credentials={
        "OPENAI_API_KEY": "sk-test",
        "HUGGING_FACE_API_KEY": "hf-test",
        "REPLICATE_API_KEY": "r8-test",
        "PICA_SECRET_KEY": "pica-secret",
        "PICA_OPENAI_CONNECTION_KEY": "pica-conn",
    }
)

REQUEST = GenerationRequest(
    message="hi there",
    profile=CharacterProfile(name="Mika", personality_traits=["shy"]),
    history=[ConversationTurn(role="user", content="earlier")],
)

PROMPT = ImagePrompt(prompt="anime style, portrait", negative_prompt="blurry", style="anime")


def _completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


def _transport(recorder: Recorder) -> httpx.MockTransport:
    return httpx.MockTransport(recorder)


# ---------------------------------------------------------------------------
# OpenAI via litellm
# ---------------------------------------------------------------------------


class TestOpenAI:
    @pytest.mark.asyncio
    async def test_complete(self) -> None:
        mock = AsyncMock(return_value=_completion("  H-hi...  "))
        with patch("amora.providers.openai.litellm.acompletion", mock):
            text = await OpenAIChatProvider(CONFIG).complete(REQUEST, PromptBuilder())

        assert text == "H-hi..."
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-3.5-turbo"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["max_tokens"] == 300
        assert kwargs["temperature"] == 0.8
        assert kwargs["num_retries"] == 0
        roles = [m["role"] for m in kwargs["messages"]]
        assert roles == ["system", "user", "user"]

    @pytest.mark.asyncio
    async def test_model_override(self) -> None:
        config = ProviderConfig(credentials=CONFIG.credentials, models={"openai": "openai/gpt-4o-mini"})
        mock = AsyncMock(return_value=_completion("ok"))
        with patch("amora.providers.openai.litellm.acompletion", mock):
            await OpenAIChatProvider(config).complete(REQUEST, PromptBuilder())
        assert mock.call_args.kwargs["model"] == "openai/gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        error = litellm.Timeout(message="slow", model="gpt", llm_provider="openai")
        with patch("amora.providers.openai.litellm.acompletion", AsyncMock(side_effect=error)):
            with pytest.raises(ProviderTimeout):
                await OpenAIChatProvider(CONFIG).complete(REQUEST, PromptBuilder())

    @pytest.mark.asyncio
    async def test_other_errors_become_provider_error(self) -> None:
        mock = AsyncMock(side_effect=RuntimeError("rate limited"))
        with patch("amora.providers.openai.litellm.acompletion", mock):
            with pytest.raises(ProviderError, match="rate limited"):
                await OpenAIChatProvider(CONFIG).complete(REQUEST, PromptBuilder())

    @pytest.mark.asyncio
    async def test_no_content(self) -> None:
        mock = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with patch("amora.providers.openai.litellm.acompletion", mock):
            with pytest.raises(ProviderError, match="no choices"):
                await OpenAIChatProvider(CONFIG).complete(REQUEST, PromptBuilder())

    def test_ensure_configured(self) -> None:
        with pytest.raises(ConfigurationMissing) as info:
            OpenAIChatProvider(ProviderConfig()).ensure_configured()
        assert info.value.missing == ["OPENAI_API_KEY"]


# ---------------------------------------------------------------------------
# Hugging Face
# ---------------------------------------------------------------------------


class TestHuggingFaceText:
    @pytest.mark.asyncio
    async def test_complete(self) -> None:
        rec = Recorder(httpx.Response(200, json=[{"generated_text": "Oh, hello!"}]))
        provider = HuggingFaceTextProvider(CONFIG, transport=_transport(rec))
        text = await provider.complete(REQUEST, PromptBuilder())

        assert text == "Oh, hello!"
        sent = rec.requests[0]
        assert str(sent.url).endswith("/models/microsoft/DialoGPT-medium")
        assert sent.headers["Authorization"] == "Bearer hf-test"
        assert rec.body["inputs"].endswith("Mika:")
        assert rec.body["parameters"]["return_full_text"] is False

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        rec = Recorder(httpx.Response(503, text="Service Unavailable"))
        provider = HuggingFaceTextProvider(CONFIG, transport=_transport(rec))
        with pytest.raises(ProviderError) as info:
            await provider.complete(REQUEST, PromptBuilder())
        assert info.value.status_code == 503
        assert "HTTP 503" in str(info.value)

    @pytest.mark.asyncio
    async def test_transport_timeout(self) -> None:
        rec = Recorder(httpx.ReadTimeout("slow"))
        provider = HuggingFaceTextProvider(CONFIG, transport=_transport(rec))
        with pytest.raises(ProviderTimeout):
            await provider.complete(REQUEST, PromptBuilder())

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        rec = Recorder(httpx.Response(200, text="<html>"))
        provider = HuggingFaceTextProvider(CONFIG, transport=_transport(rec))
        with pytest.raises(ProviderError, match="malformed"):
            await provider.complete(REQUEST, PromptBuilder())


class TestHuggingFaceImage:
    @pytest.mark.asyncio
    async def test_render_returns_data_url(self) -> None:
        rec = Recorder(
            httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})
        )
        provider = HuggingFaceImageProvider(CONFIG, transport=_transport(rec))
        url = await provider.render(PROMPT)

        assert url.startswith("data:image/png;base64,")
        assert rec.body["parameters"]["negative_prompt"] == "blurry"
        assert rec.requests[0].headers["Accept"] == "image/png"

    @pytest.mark.asyncio
    async def test_json_error(self) -> None:
        rec = Recorder(httpx.Response(200, json={"error": "Model is loading"}))
        provider = HuggingFaceImageProvider(CONFIG, transport=_transport(rec))
        with pytest.raises(ProviderError, match="Model is loading"):
            await provider.render(PROMPT)


# ---------------------------------------------------------------------------
# Replicate and Pica
# ---------------------------------------------------------------------------


class TestReplicate:
    @pytest.mark.asyncio
    async def test_render(self) -> None:
        rec = Recorder(httpx.Response(201, json={"status": "succeeded", "output": ["https://r8/img.png"]}))
        provider = ReplicateImageProvider(CONFIG, transport=_transport(rec))
        url = await provider.render(PROMPT)

        assert url == "https://r8/img.png"
        assert rec.requests[0].headers["Authorization"] == "Token r8-test"
        assert rec.requests[0].headers["Prefer"] == "wait"
        assert rec.body["input"]["negative_prompt"] == "blurry"
        assert rec.body["version"] == provider.model

    @pytest.mark.asyncio
    async def test_no_output(self) -> None:
        rec = Recorder(httpx.Response(201, json={"status": "starting", "output": None}))
        provider = ReplicateImageProvider(CONFIG, transport=_transport(rec))
        with pytest.raises(ProviderError, match="starting"):
            await provider.render(PROMPT)


class TestPica:
    @pytest.mark.asyncio
    async def test_render_without_negative_prompt(self) -> None:
        rec = Recorder(httpx.Response(200, json={"data": [{"url": "https://dalle/img.png"}]}))
        provider = PicaDalleImageProvider(CONFIG, transport=_transport(rec))
        url = await provider.render(PROMPT)

        assert url == "https://dalle/img.png"
        headers = rec.requests[0].headers
        assert headers["x-pica-secret"] == "pica-secret"
        assert headers["x-pica-connection-key"] == "pica-conn"
        assert "negative_prompt" not in rec.body
        assert rec.body["model"] == "dall-e-3"

    def test_needs_both_keys(self) -> None:
        config = ProviderConfig(credentials={"PICA_SECRET_KEY": "only-one"})
        with pytest.raises(ConfigurationMissing) as info:
            PicaDalleImageProvider(config).ensure_configured()
        assert info.value.missing == ["PICA_OPENAI_CONNECTION_KEY"]


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


class TestBuildProviders:
    def test_default_order(self) -> None:
        assert [p.name for p in build_text_providers(CONFIG)] == ["openai", "huggingface"]
        assert [p.name for p in build_image_providers(CONFIG)] == [
            "huggingface-image", "replicate", "pica-dalle",
        ]

    def test_custom_order_ignores_unknown(self) -> None:
        config = ProviderConfig(image_priority=("pica-dalle", "midjourney", "replicate"))
        assert [p.name for p in build_image_providers(config)] == ["pica-dalle", "replicate"]

    def test_kind_mismatch_is_ignored(self) -> None:
        config = ProviderConfig(text_priority=("replicate", "huggingface"))
        assert [p.name for p in build_text_providers(config)] == ["huggingface"]
