"""amora — AI companion response orchestration with layered provider fallback."""

from amora.chain import ProviderChain, generate
from amora.config import Config
from amora.errors import (
    AllProvidersExhausted,
    AmoraError,
    ConfigurationMissing,
    DeadlineExceeded,
    ProviderError,
    ProviderTimeout,
)
from amora.images import FallbackImageSelector, ImageChain, ImagePromptComposer, generate_image
from amora.models import (
    CharacterProfile,
    ConversationTurn,
    GenerationRequest,
    GenerationResult,
    ImageGenerationRequest,
    ImageGenerationResult,
    ImagePrompt,
    ProviderLayer,
)
from amora.prompts import PromptBuilder
from amora.responder import LocalPersonalityResponder
from amora.retry import RetryableCall

__all__ = [
    "AllProvidersExhausted",
    "AmoraError",
    "CharacterProfile",
    "Config",
    "ConfigurationMissing",
    "ConversationTurn",
    "DeadlineExceeded",
    "FallbackImageSelector",
    "GenerationRequest",
    "GenerationResult",
    "ImageChain",
    "ImageGenerationRequest",
    "ImageGenerationResult",
    "ImagePrompt",
    "ImagePromptComposer",
    "LocalPersonalityResponder",
    "PromptBuilder",
    "ProviderChain",
    "ProviderError",
    "ProviderLayer",
    "ProviderTimeout",
    "RetryableCall",
    "generate",
    "generate_image",
]
