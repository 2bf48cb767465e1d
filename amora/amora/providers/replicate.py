"""Replicate predictions API (Stable Diffusion)."""

from __future__ import annotations

from amora import http
from amora.models import ImagePrompt
from amora.normalizers import normalize_replicate
from amora.providers.base import ImageProvider
from vendorkit import PROVIDERS


class ReplicateImageProvider(ImageProvider):
    """Synchronous prediction; ``Prefer: wait`` holds the request until output."""

    info = PROVIDERS["replicate"]

    async def render(self, prompt: ImagePrompt) -> str:
        model_input: dict[str, object] = {
            "prompt": prompt.prompt,
            "width": prompt.width,
            "height": prompt.height,
            "num_inference_steps": 30,
            "guidance_scale": 7.5,
            "scheduler": "K_EULER_ANCESTRAL",
        }
        if prompt.negative_prompt:
            model_input["negative_prompt"] = prompt.negative_prompt

        resp = await http.request(
            self.name,
            "POST",
            self.info.endpoint or "",
            headers={
                "Authorization": f"Token {self._credential('REPLICATE_API_KEY')}",
                "Prefer": "wait",
            },
            json={"version": self.model, "input": model_input},
            timeout=self.timeout_s,
            transport=self._transport,
        )
        return self._unwrap(normalize_replicate(http.json_body(self.name, resp)))
