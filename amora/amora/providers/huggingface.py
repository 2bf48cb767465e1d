"""Hugging Face inference API — secondary text provider and first image provider."""

from __future__ import annotations

from amora import http
from amora.models import GenerationRequest, ImagePrompt
from amora.normalizers import normalize_hf_image, normalize_hf_text
from amora.prompts import PromptBuilder
from amora.providers.base import BaseProvider, ImageProvider, TextProvider
from vendorkit import PROVIDERS

_API_KEY = "HUGGING_FACE_API_KEY"


def _model_url(provider: BaseProvider) -> str:
    return f"{provider.info.endpoint}/{provider.model}"


class HuggingFaceTextProvider(TextProvider):
    """Text generation on a hosted conversational model."""

    info = PROVIDERS["huggingface"]

    async def complete(self, request: GenerationRequest, builder: PromptBuilder) -> str:
        resp = await http.request(
            self.name,
            "POST",
            _model_url(self),
            headers={"Authorization": f"Bearer {self._credential(_API_KEY)}"},
            json={
                "inputs": builder.build_dialogue(request),
                "parameters": {
                    "max_new_tokens": 200,
                    "temperature": 0.8,
                    "return_full_text": False,
                },
                "options": {"wait_for_model": True},
            },
            timeout=self.timeout_s,
            transport=self._transport,
        )
        return self._unwrap(normalize_hf_text(http.json_body(self.name, resp)))


class HuggingFaceImageProvider(ImageProvider):
    """Stable Diffusion on the inference API; returns the image as a data URL."""

    info = PROVIDERS["huggingface-image"]

    async def render(self, prompt: ImagePrompt) -> str:
        parameters: dict[str, object] = {
            "num_inference_steps": 30,
            "guidance_scale": 7.5,
            "width": prompt.width,
            "height": prompt.height,
        }
        if prompt.negative_prompt:
            parameters["negative_prompt"] = prompt.negative_prompt

        resp = await http.request(
            self.name,
            "POST",
            _model_url(self),
            headers={
                "Authorization": f"Bearer {self._credential(_API_KEY)}",
                "Accept": "image/png",
            },
            json={"inputs": prompt.prompt, "parameters": parameters},
            timeout=self.timeout_s,
            transport=self._transport,
        )
        content_type = resp.headers.get("content-type")
        payload = None
        if not (content_type or "").startswith("image/"):
            try:
                payload = resp.json()
            except ValueError:
                payload = None
        return self._unwrap(normalize_hf_image(content_type, resp.content, payload))
