"""Tests for the voice catalog and previews."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from amora.config import Config
from amora.errors import ConfigurationMissing, ProviderError
from amora.voices import FALLBACK_VOICES, VOICE_SETTINGS, list_voices, preview_voice
from vendorkit import ProviderConfig

WITH_KEY = Config(providers=ProviderConfig(credentials={"ELEVENLABS_API_KEY": "xi-test"}))
NO_KEY = Config(providers=ProviderConfig())

_LISTING = {
    "voices": [
        {
            "voice_id": "21m00",
            "name": "Rachel",
            "category": "premade",
            "labels": {"gender": "female", "accent": "american", "description": "calm"},
            "preview_url": "https://cdn/rachel.mp3",
        },
        {"voice_id": "mine", "name": "My Clone", "category": "cloned", "labels": {}},
    ]
}


class TestListVoices:
    @pytest.mark.asyncio
    async def test_without_key_uses_fallback(self) -> None:
        catalog = await list_voices(NO_KEY)
        assert catalog.is_fallback is True
        assert [v.name for v in catalog.voices] == ["Alex", "David", "Sarah", "Emma", "Luna"]
        assert "ELEVENLABS_API_KEY" in (catalog.message or "")

    @pytest.mark.asyncio
    async def test_premade_voices(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_LISTING)

        catalog = await list_voices(WITH_KEY, transport=httpx.MockTransport(handler))

        assert catalog.is_fallback is False
        assert [v.voice_id for v in catalog.voices] == ["21m00"]
        assert catalog.voices[0].age == "adult"
        assert seen[0].headers["xi-api-key"] == "xi-test"
        assert str(seen[0].url) == "https://api.elevenlabs.io/v1/voices"

    @pytest.mark.asyncio
    async def test_api_failure_uses_fallback(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad key"))
        catalog = await list_voices(WITH_KEY, transport=transport)
        assert catalog.is_fallback is True
        assert len(catalog.voices) == len(FALLBACK_VOICES)

    @pytest.mark.asyncio
    async def test_malformed_entries_do_not_break_listing(self) -> None:
        listing = {
            "voices": [
                {"voice_id": "v1", "name": "Ada", "category": "premade", "labels": ["x"]},
                {"voice_id": "v2", "name": 5, "category": "premade", "labels": {}},
                {"voice_id": None, "name": "Ghost", "category": "premade"},
            ]
        }
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=listing))
        catalog = await list_voices(WITH_KEY, transport=transport)

        assert catalog.is_fallback is False
        assert [v.voice_id for v in catalog.voices] == ["v1"]
        assert catalog.voices[0].gender == "neutral"
        assert catalog.voices[0].description == ""


class TestPreviewVoice:
    @pytest.mark.asyncio
    async def test_preview(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ID3audio", headers={"content-type": "audio/mpeg"})

        preview = await preview_voice(
            "21m00", "Hello there", WITH_KEY, transport=httpx.MockTransport(handler)
        )

        assert base64.b64decode(preview.audio_base64) == b"ID3audio"
        assert preview.content_type == "audio/mpeg"
        assert preview.model_used == "eleven_multilingual_v2"
        body = json.loads(seen[0].content)
        assert body["model_id"] == "eleven_multilingual_v2"
        assert body["voice_settings"] == VOICE_SETTINGS
        assert str(seen[0].url).endswith("/text-to-speech/21m00")

    @pytest.mark.asyncio
    async def test_requires_key(self) -> None:
        with pytest.raises(ConfigurationMissing):
            await preview_voice("21m00", "Hello", NO_KEY)

    @pytest.mark.asyncio
    async def test_api_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(ProviderError) as info:
            await preview_voice("21m00", "Hello", WITH_KEY, transport=transport)
        assert info.value.status_code == 500
