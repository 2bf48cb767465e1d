"""Vendor adapters, assembled in configured priority order."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeVar

import httpx

from amora.providers.base import BaseProvider, ImageProvider, TextProvider
from amora.providers.huggingface import HuggingFaceImageProvider, HuggingFaceTextProvider
from amora.providers.openai import OpenAIChatProvider
from amora.providers.pica import PicaDalleImageProvider
from amora.providers.replicate import ReplicateImageProvider
from vendorkit import ProviderConfig

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseProvider)

TEXT_ADAPTERS: dict[str, type[TextProvider]] = {
    cls.info.name: cls
    for cls in [OpenAIChatProvider, HuggingFaceTextProvider]
}

IMAGE_ADAPTERS: dict[str, type[ImageProvider]] = {
    cls.info.name: cls
    for cls in [HuggingFaceImageProvider, ReplicateImageProvider, PicaDalleImageProvider]
}


def _build(
    names: tuple[str, ...],
    adapters: Mapping[str, type[P]],
    config: ProviderConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> list[P]:
    built: list[P] = []
    for name in names:
        cls = adapters.get(name)
        if cls is None:
            logger.warning("Unknown provider %r in priority list, ignoring", name)
            continue
        built.append(cls(config, transport=transport))
    return built


def build_text_providers(
    config: ProviderConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[TextProvider]:
    """Instantiate text adapters in ``config.text_priority`` order."""
    return _build(config.text_priority, TEXT_ADAPTERS, config, transport)


def build_image_providers(
    config: ProviderConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ImageProvider]:
    """Instantiate image adapters in ``config.image_priority`` order."""
    return _build(config.image_priority, IMAGE_ADAPTERS, config, transport)


__all__ = [
    "BaseProvider",
    "IMAGE_ADAPTERS",
    "ImageProvider",
    "TEXT_ADAPTERS",
    "TextProvider",
    "build_image_providers",
    "build_text_providers",
]
