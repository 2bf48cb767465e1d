"""ElevenLabs voice catalog and previews."""

from __future__ import annotations

import base64
import logging

import httpx
from pydantic import BaseModel, Field, ValidationError

from amora import http
from amora.config import Config
from amora.errors import AmoraError, ConfigurationMissing, ProviderError
from amora.normalizers import normalize_voice_listing
from vendorkit import PROVIDERS

logger = logging.getLogger(__name__)

_INFO = PROVIDERS["elevenlabs"]
_API_KEY = "ELEVENLABS_API_KEY"


class Voice(BaseModel, frozen=True):
    voice_id: str
    name: str
    gender: str = "neutral"
    accent: str = "neutral"
    age: str = "adult"
    description: str = ""
    preview_url: str | None = None


class VoiceCatalog(BaseModel, frozen=True):
    voices: list[Voice] = Field(default_factory=list)
    is_fallback: bool = False
    message: str | None = None


class VoicePreview(BaseModel, frozen=True):
    audio_base64: str
    content_type: str = "audio/mpeg"
    model_used: str


FALLBACK_VOICES: tuple[Voice, ...] = (
    Voice(voice_id="fallback-male-1", name="Alex", gender="male", accent="American",
          age="young adult", description="Warm and friendly voice"),
    Voice(voice_id="fallback-male-2", name="David", gender="male", accent="British",
          age="middle aged", description="Sophisticated and calm"),
    Voice(voice_id="fallback-female-1", name="Sarah", gender="female", accent="American",
          age="young adult", description="Sweet and cheerful voice"),
    Voice(voice_id="fallback-female-2", name="Emma", gender="female", accent="British",
          age="young adult", description="Elegant and articulate"),
    Voice(voice_id="fallback-female-3", name="Luna", gender="female", accent="Neutral",
          age="young adult", description="Soft and mysterious"),
)

# Fixed settings for previews
VOICE_SETTINGS = {
    "stability": 0.6,
    "similarity_boost": 0.7,
    "style": 0.3,
    "use_speaker_boost": True,
}


def _fallback(message: str) -> VoiceCatalog:
    return VoiceCatalog(voices=list(FALLBACK_VOICES), is_fallback=True, message=message)


async def list_voices(
    config: Config | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VoiceCatalog:
    """Return the premade ElevenLabs voices, or the curated fallback list.

    Never raises: a missing key or a failing API yields the fallback catalog.
    """
    if config is None:
        config = Config.from_env()

    api_key = config.providers.credential(_API_KEY)
    if api_key is None:
        logger.info("No %s configured, using fallback voices", _API_KEY)
        return _fallback(
            f"Using fallback voices. Configure {_API_KEY} for full voice selection."
        )

    try:
        resp = await http.request(
            _INFO.name,
            "GET",
            f"{_INFO.endpoint}/voices",
            headers={"xi-api-key": api_key},
            timeout=_INFO.timeout_ms / 1000,
            transport=transport,
        )
        listing = normalize_voice_listing(http.json_body(_INFO.name, resp))
        voices = [Voice(**v) for v in listing]
    except (AmoraError, ValidationError) as exc:
        logger.warning("Voice listing failed, using fallback voices: %s", exc)
        return _fallback("ElevenLabs API unavailable. Using fallback voices.")

    return VoiceCatalog(voices=voices)


async def preview_voice(
    voice_id: str,
    text: str,
    config: Config | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VoicePreview:
    """Synthesize *text* with *voice_id* and return the audio base64-encoded.

    Raises ``ConfigurationMissing`` without an API key and ``ProviderError``
    when synthesis fails.
    """
    if config is None:
        config = Config.from_env()

    api_key = config.providers.credential(_API_KEY)
    if api_key is None:
        raise ConfigurationMissing(_INFO.name, [_API_KEY])

    resp = await http.request(
        _INFO.name,
        "POST",
        f"{_INFO.endpoint}/text-to-speech/{voice_id}",
        headers={"xi-api-key": api_key, "Accept": "audio/mpeg"},
        json={
            "text": text,
            "model_id": _INFO.default_model,
            "voice_settings": VOICE_SETTINGS,
        },
        timeout=_INFO.timeout_ms / 1000,
        transport=transport,
    )
    if not resp.content:
        raise ProviderError(_INFO.name, "empty audio response")

    content_type = resp.headers.get("content-type", "audio/mpeg").split(";")[0].strip()
    return VoicePreview(
        audio_base64=base64.b64encode(resp.content).decode("ascii"),
        content_type=content_type,
        model_used=_INFO.default_model,
    )
