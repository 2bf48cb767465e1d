"""Failure taxonomy for provider orchestration."""

from __future__ import annotations


class AmoraError(Exception):
    """Base class for every error raised by amora."""


class ConfigurationMissing(AmoraError):
    """A provider's credentials are absent. Causes a skip, not a failure."""

    def __init__(self, provider: str, missing: list[str]) -> None:
        self.provider = provider
        self.missing = missing
        super().__init__(f"not configured (missing {', '.join(missing)})")


class ProviderError(AmoraError):
    """Non-2xx status, transport failure or malformed response. Retryable."""

    def __init__(
        self, provider: str, message: str, *, status_code: int | None = None
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class ProviderTimeout(ProviderError, TimeoutError):
    """The call did not finish within its timeout. Retryable."""

    def __init__(self, provider: str, timeout_ms: float) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(provider, f"timed out after {timeout_ms:.0f}ms")


class DeadlineExceeded(AmoraError):
    """The caller's overall time ceiling was reached."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"{label}: overall deadline exceeded")


class AllProvidersExhausted(AmoraError):
    """Every provider was skipped or failed. Never leaves the chain."""

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = reasons
        super().__init__("; ".join(reasons) or "no providers configured")
