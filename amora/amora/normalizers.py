"""Per-vendor response normalizers.

Every vendor wraps its output in a different envelope. Each function here
reduces one envelope to a ``NormalizedResponse`` so the orchestration code
never inspects vendor JSON itself.
"""

from __future__ import annotations

import base64
from typing import Any

from pydantic import BaseModel


class NormalizedResponse(BaseModel, frozen=True):
    ok: bool
    text: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, text: str | None) -> NormalizedResponse:
        if text is None or not text.strip():
            return cls(ok=False, error="empty response")
        return cls(ok=True, text=text.strip())

    @classmethod
    def failure(cls, error: str) -> NormalizedResponse:
        return cls(ok=False, error=error)


def _get(obj: Any, key: str) -> Any:
    """Read *key* from a mapping or an attribute-style response object."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def normalize_chat_completion(response: Any) -> NormalizedResponse:
    """``choices[0].message.content`` — OpenAI / litellm shape."""
    choices = _get(response, "choices")
    if not choices:
        return NormalizedResponse.failure("chat completion returned no choices")
    message = _get(choices[0], "message")
    content = _get(message, "content") if message is not None else None
    if content is None:
        return NormalizedResponse.failure("chat completion returned no content")
    return NormalizedResponse.success(content)


def normalize_hf_text(payload: Any) -> NormalizedResponse:
    """``[{"generated_text": ...}]`` or ``{"error": ...}``."""
    if isinstance(payload, dict):
        if payload.get("error"):
            return NormalizedResponse.failure(str(payload["error"]))
        payload = [payload]
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return NormalizedResponse.success(payload[0].get("generated_text"))
    return NormalizedResponse.failure("unexpected Hugging Face text payload")


def normalize_hf_image(
    content_type: str | None, body: bytes, payload: Any = None
) -> NormalizedResponse:
    """Raw image bytes become a data URL; JSON bodies carry an error."""
    if content_type and content_type.startswith("image/"):
        if not body:
            return NormalizedResponse.failure("empty image body")
        encoded = base64.b64encode(body).decode("ascii")
        mime = content_type.split(";")[0].strip()
        return NormalizedResponse.success(f"data:{mime};base64,{encoded}")
    if isinstance(payload, dict) and payload.get("error"):
        return NormalizedResponse.failure(str(payload["error"]))
    return NormalizedResponse.failure("Unknown error from Hugging Face API")


def normalize_replicate(payload: Any) -> NormalizedResponse:
    """``{"output": [url, ...]}``, else ``detail``/``error``."""
    if not isinstance(payload, dict):
        return NormalizedResponse.failure("unexpected Replicate payload")
    output = payload.get("output")
    if isinstance(output, list) and output:
        return NormalizedResponse.success(str(output[0]))
    if isinstance(output, str):
        return NormalizedResponse.success(output)
    detail = payload.get("detail") or payload.get("error")
    if detail:
        return NormalizedResponse.failure(str(detail))
    status = payload.get("status", "unknown")
    return NormalizedResponse.failure(f"prediction has no output (status: {status})")


def normalize_image_listing(payload: Any) -> NormalizedResponse:
    """``{"data": [{"url": ...}]}`` — DALL·E style, else ``error.message``."""
    if not isinstance(payload, dict):
        return NormalizedResponse.failure("unexpected image listing payload")
    data = payload.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return NormalizedResponse.success(data[0].get("url"))
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return NormalizedResponse.failure(str(error["message"]))
    if error:
        return NormalizedResponse.failure(str(error))
    return NormalizedResponse.failure("image listing returned no data")


def _text(value: Any, default: str | None = None) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else default


def normalize_voice_listing(payload: Any) -> list[dict[str, str | None]]:
    """Keep premade ElevenLabs voices, flattened to catalog fields.

    Entries without a usable ``voice_id`` and ``name`` are dropped; malformed
    labels fall back to the catalog defaults.
    """
    voices = payload.get("voices") if isinstance(payload, dict) else None
    if not isinstance(voices, list):
        return []
    out: list[dict[str, str | None]] = []
    for voice in voices:
        if not isinstance(voice, dict) or voice.get("category") != "premade":
            continue
        voice_id, name = _text(voice.get("voice_id")), _text(voice.get("name"))
        if voice_id is None or name is None:
            continue
        labels = voice.get("labels")
        if not isinstance(labels, dict):
            labels = {}
        out.append({
            "voice_id": voice_id,
            "name": name,
            "gender": _text(labels.get("gender"), "neutral"),
            "accent": _text(labels.get("accent"), "neutral"),
            "age": _text(labels.get("age"), "adult"),
            "description": _text(labels.get("description"), ""),
            "preview_url": _text(voice.get("preview_url")),
        })
    return out
