"""DALL·E 3 through the Pica passthrough API."""

from __future__ import annotations

from amora import http
from amora.models import ImagePrompt
from amora.normalizers import normalize_image_listing
from amora.providers.base import ImageProvider
from vendorkit import PROVIDERS

_ACTION_ID = "conn_mod_def::GDzgKm29yzA::qOaVIyE3RWmrUDhvW7VmDw"


class PicaDalleImageProvider(ImageProvider):
    """DALL·E takes no negative prompt; only the positive prompt is sent."""

    info = PROVIDERS["pica-dalle"]

    async def render(self, prompt: ImagePrompt) -> str:
        resp = await http.request(
            self.name,
            "POST",
            self.info.endpoint or "",
            headers={
                "x-pica-secret": self._credential("PICA_SECRET_KEY"),
                "x-pica-connection-key": self._credential("PICA_OPENAI_CONNECTION_KEY"),
                "x-pica-action-id": _ACTION_ID,
            },
            json={
                "prompt": prompt.prompt,
                "model": self.model,
                "size": "1024x1024",
                "quality": "standard",
                "style": "natural",
                "response_format": "url",
                "n": 1,
            },
            timeout=self.timeout_s,
            transport=self._transport,
        )
        return self._unwrap(normalize_image_listing(http.json_body(self.name, resp)))
