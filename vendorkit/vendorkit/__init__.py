"""vendorkit — Shared vendor presets and credential configuration."""

from vendorkit.config import ProviderConfig
from vendorkit.providers import (
    DEFAULT_IMAGE_PRIORITY,
    DEFAULT_TEXT_PRIORITY,
    PROVIDERS,
    ProviderInfo,
    get_provider,
    list_providers,
    providers_of_kind,
)

__all__ = [
    "DEFAULT_IMAGE_PRIORITY",
    "DEFAULT_TEXT_PRIORITY",
    "PROVIDERS",
    "ProviderConfig",
    "ProviderInfo",
    "get_provider",
    "list_providers",
    "providers_of_kind",
]
