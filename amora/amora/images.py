"""Character portrait generation with a deterministic placeholder fallback."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from amora.chain import attempt_in_order
from amora.config import Config
from amora.errors import AllProvidersExhausted, ProviderError
from amora.models import (
    CharacterProfile,
    ImageGenerationRequest,
    ImageGenerationResult,
    ImagePrompt,
)
from amora.providers import ImageProvider, build_image_providers
from amora.retry import Clock, Deadline, RetryableCall, Sleep

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Prompt composition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyleVocabulary:
    prefix: str
    details: str
    quality: str


_STYLES: dict[str, StyleVocabulary] = {
    "anime": StyleVocabulary(
        prefix="anime style, manga style, cel shaded",
        details="large expressive eyes, vibrant colors, soft cel-shading, clean line art, "
        "anime proportions, detailed hair",
        quality="high quality anime art, studio quality, detailed anime illustration",
    ),
    "manhwa": StyleVocabulary(
        prefix="manhwa style, webtoon style, korean digital comic",
        details="sharp elegant line art, luminous skin shading, slender proportions, "
        "glossy detailed hair, dramatic soft lighting",
        quality="high quality webtoon illustration, professional manhwa art",
    ),
    "comic": StyleVocabulary(
        prefix="comic book style, western comic art",
        details="bold clean line art, dynamic pose, strong contrast, vibrant colors, "
        "comic book shading, heroic proportions",
        quality="high quality comic art, professional comic illustration",
    ),
    "realistic": StyleVocabulary(
        prefix="photorealistic, realistic portrait, digital painting",
        details="natural human proportions, realistic skin textures, detailed facial "
        "features, natural lighting, lifelike detail",
        quality="photorealistic, high resolution, professional portrait",
    ),
    "cartoon": StyleVocabulary(
        prefix="stylized cartoon illustration",
        details="simplified shapes, exaggerated friendly features, vibrant flat colors, "
        "clean outlines",
        quality="high quality cartoon art, polished character design",
    ),
    "3d": StyleVocabulary(
        prefix="3d render, digital art, cgi",
        details="realistic 3d rendering, soft lighting, detailed textures, smooth "
        "surfaces, professional 3d modeling",
        quality="high quality 3d render, octane render, unreal engine",
    ),
}

_DEFAULT_STYLE = StyleVocabulary(
    prefix="digital art, illustration",
    details="professional artistic quality, appealing character design, vibrant colors",
    quality="high quality digital art, professional illustration",
)

NEGATIVE_PROMPT = (
    "low quality, blurry, distorted, deformed, ugly, bad anatomy, extra limbs, "
    "text, watermark, signature, logo, multiple people, nsfw"
)


class ImagePromptComposer:
    """Builds a style-specific portrait prompt from a character profile."""

    def compose(self, profile: CharacterProfile) -> ImagePrompt:
        style_key = (profile.art_style or "").strip().lower()
        vocab = _STYLES.get(style_key, _DEFAULT_STYLE)

        traits = profile.traits
        if traits:
            personality = (
                f"{', '.join(traits[:3])} personality, "
                f"expressive face showing {traits[0]} traits"
            )
        else:
            personality = "friendly and approachable expression"

        features = [
            f"{profile.height} height" if profile.height else None,
            f"{profile.build} build" if profile.build else None,
            f"{profile.eye_color} eyes" if profile.eye_color else None,
            f"{profile.hair_color} hair" if profile.hair_color else None,
            f"{profile.skin_tone} skin" if profile.skin_tone else None,
        ]
        parts = [
            vocab.prefix,
            f"portrait of a {profile.gender or 'nonbinary'} character",
            *[f for f in features if f],
            personality,
            vocab.details,
            "upper body shot, centered composition, soft background",
            vocab.quality,
        ]
        return ImagePrompt(
            prompt=", ".join(parts),
            negative_prompt=NEGATIVE_PROMPT,
            style=style_key if style_key in _STYLES else "default",
        )


# ---------------------------------------------------------------------------
# Placeholder lookup
# ---------------------------------------------------------------------------

_MALE_REALISTIC = (
    "https://images.pexels.com/photos/2379004/pexels-photo-2379004.jpeg"
    "?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=1"
)
_FEMALE_ANIME = (
    "https://images.pexels.com/photos/3992656/pexels-photo-3992656.png"
    "?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=1"
)

PLACEHOLDER_IMAGES: dict[str, dict[str, str]] = {
    "male": {
        "anime": "/art-styles/male anime.jpg",
        "3d": "/art-styles/male 3d.jpg",
        "comic": "/art-styles/male comicbook.jpg",
        "realistic": _MALE_REALISTIC,
        "default": "/art-styles/male anime.jpg",
    },
    "female": {
        "anime": _FEMALE_ANIME,
        "3d": "/art-styles/female 3d.jpg",
        "comic": "/art-styles/female comicbook.jpg",
        "realistic": "/art-styles/female realistic.jpg",
        "default": "/art-styles/female 3d.jpg",
    },
    "nonbinary": {
        "anime": "/art-styles/male anime.jpg",
        "3d": "/art-styles/male 3d.jpg",
        "comic": "/art-styles/male comicbook.jpg",
        "realistic": _MALE_REALISTIC,
        "default": "/art-styles/male anime.jpg",
    },
}

NEUTRAL_TABLE = "nonbinary"


class FallbackImageSelector:
    """Two-level lookup: gender table, then art style, then the table default."""

    def __init__(self, images: dict[str, dict[str, str]] | None = None) -> None:
        self._images = images or PLACEHOLDER_IMAGES

    def resolve(self, gender: str | None, art_style: str | None) -> tuple[str, str]:
        """Return the (gender, style) keys the lookup actually lands on."""
        gender_key = (gender or "").strip().lower()
        if gender_key not in self._images:
            gender_key = NEUTRAL_TABLE
        style_key = (art_style or "").strip().lower()
        if not self._images[gender_key].get(style_key):
            style_key = "default"
        return gender_key, style_key

    def select(self, gender: str | None, art_style: str | None) -> str:
        gender_key, style_key = self.resolve(gender, art_style)
        return self._images[gender_key][style_key]


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class ImageChain:
    """Tries image providers in order; falls back to a placeholder image.

    ``generate_image`` never raises.
    """

    def __init__(
        self,
        providers: Sequence[ImageProvider],
        *,
        composer: ImagePromptComposer | None = None,
        selector: FallbackImageSelector | None = None,
        deadline_s: float | None = None,
        base_delay_ms: int = 1000,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._providers = list(providers)
        self._composer = composer or ImagePromptComposer()
        self._selector = selector or FallbackImageSelector()
        self._deadline_s = deadline_s
        self._base_delay_ms = base_delay_ms
        self._retry = RetryableCall(sleep=sleep)
        self._clock = clock

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResult:
        profile = request.profile
        started = self._clock()
        deadline = (
            Deadline(self._deadline_s, self._clock) if self._deadline_s else None
        )
        prompt = self._composer.compose(profile)
        logger.debug("Portrait prompt: %s", prompt.prompt)

        async def render(provider: ImageProvider) -> str:
            if provider.info.supports_negative_prompt:
                url = await provider.render(prompt)
            else:
                url = await provider.render(prompt.model_copy(update={"negative_prompt": None}))
            if not url or not url.strip():
                raise ProviderError(provider.name, "empty response")
            return url.strip()

        try:
            attempt = await attempt_in_order(
                self._providers,
                render,
                retry=self._retry,
                base_delay_ms=self._base_delay_ms,
                deadline=deadline,
            )
        except AllProvidersExhausted as exhausted:
            logger.warning("All image providers exhausted, using placeholder: %s", exhausted)
            gender, art_style = self._selector.resolve(profile.gender, profile.art_style)
            return ImageGenerationResult(
                image_url=self._selector.select(gender, art_style),
                is_placeholder=True,
                provider_name="placeholder",
                gender=gender,
                art_style=art_style,
                prompt=prompt.prompt,
                negative_prompt=prompt.negative_prompt,
                fallback_reason=str(exhausted),
                latency_ms=int((self._clock() - started) * 1000),
            )

        return ImageGenerationResult(
            image_url=attempt.value,
            is_placeholder=False,
            provider_name=attempt.provider.name,
            gender=profile.gender,
            art_style=profile.art_style,
            prompt=prompt.prompt,
            negative_prompt=(
                prompt.negative_prompt
                if attempt.provider.info.supports_negative_prompt
                else None
            ),
            fallback_reason="; ".join(attempt.reasons) or None,
            latency_ms=int((self._clock() - started) * 1000),
        )


async def generate_image(
    request: ImageGenerationRequest,
    *,
    config: Config | None = None,
) -> ImageGenerationResult:
    """Generate a character portrait with the configured image providers."""
    if config is None:
        config = Config.from_env()

    chain = ImageChain(
        build_image_providers(config.providers),
        deadline_s=config.image_deadline_s,
        base_delay_ms=config.base_delay_ms,
    )
    return await chain.generate_image(request)
