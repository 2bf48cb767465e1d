"""Layered text generation: primary → secondary → local personality responder."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from amora.config import Config
from amora.errors import (
    AllProvidersExhausted,
    AmoraError,
    DeadlineExceeded,
    ProviderError,
)
from amora.models import GenerationRequest, GenerationResult, ProviderLayer
from amora.prompts import PromptBuilder
from amora.providers import BaseProvider, TextProvider, build_text_providers
from amora.responder import LocalPersonalityResponder
from amora.retry import Clock, Deadline, RetryableCall, Sleep

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseProvider)
T = TypeVar("T")


class ChainState(str, Enum):
    NOT_STARTED = "not_started"
    TRYING = "trying"
    SUCCESS = "success"
    LOCAL_FALLBACK = "local_fallback"
    DONE = "done"


def layer_for(index: int) -> ProviderLayer:
    return ProviderLayer.PRIMARY if index == 0 else ProviderLayer.SECONDARY


def _log_state(state: ChainState, provider: str | None = None) -> None:
    logger.debug("chain state -> %s%s", state.value, f" ({provider})" if provider else "")


@dataclass(frozen=True)
class Attempt(Generic[P, T]):
    """The provider that answered, its position, and what it returned."""

    index: int
    provider: P
    value: T
    reasons: list[str]


async def attempt_in_order(
    providers: Sequence[P],
    call: Callable[[P], Awaitable[T]],
    *,
    retry: RetryableCall,
    base_delay_ms: int,
    deadline: Deadline | None = None,
    on_state: Callable[[ChainState, str | None], None] | None = None,
) -> Attempt[P, T]:
    """Try *providers* strictly in order; return the first success.

    Unconfigured providers are skipped without being called. Each attempted
    provider runs through *retry* with its own timeout and retry budget.
    Every skip and failure is recorded; if nothing succeeds,
    ``AllProvidersExhausted`` carries the reasons.
    """
    reasons: list[str] = []

    for index, provider in enumerate(providers):
        label = f"{layer_for(index).value}({provider.name})"
        try:
            provider.ensure_configured()
        except AmoraError as exc:
            logger.warning("Skipping %s: %s", label, exc)
            reasons.append(f"{label}: {exc}")
            continue

        if deadline is not None and deadline.expired:
            reasons.append(f"{label}: skipped, overall deadline exceeded")
            break

        if on_state is not None:
            on_state(ChainState.TRYING, provider.name)
        logger.debug("Trying %s", label)
        try:
            value = await retry.execute(
                lambda provider=provider: call(provider),
                max_retries=provider.info.max_retries,
                base_delay_ms=base_delay_ms,
                timeout_ms=provider.info.timeout_ms,
                deadline=deadline,
                label=provider.name,
            )
        except DeadlineExceeded as exc:
            # out of time for this provider's retries; later ones may still fit
            detail = (
                f"{exc.__cause__}; no time left to retry"
                if exc.__cause__ is not None
                else "overall deadline exceeded"
            )
            logger.warning("Giving up on %s: %s", label, detail)
            reasons.append(f"{label}: {detail}")
            continue
        except Exception as exc:
            logger.warning("%s failed: %s", label, exc)
            reasons.append(f"{label}: {exc}")
            continue

        logger.info("%s answered", label)
        return Attempt(index=index, provider=provider, value=value, reasons=reasons)

    raise AllProvidersExhausted(reasons)


class ProviderChain:
    """Orchestrates text providers and degrades to the local responder.

    ``generate`` never raises: the worst case is an in-character local reply
    with ``used_fallback=True``.
    """

    def __init__(
        self,
        providers: Sequence[TextProvider],
        *,
        responder: LocalPersonalityResponder | None = None,
        builder: PromptBuilder | None = None,
        deadline_s: float | None = None,
        base_delay_ms: int = 1000,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._providers = list(providers)
        self._responder = responder or LocalPersonalityResponder()
        self._builder = builder or PromptBuilder()
        self._deadline_s = deadline_s
        self._base_delay_ms = base_delay_ms
        self._retry = RetryableCall(sleep=sleep)
        self._clock = clock

    async def _complete(self, provider: TextProvider, request: GenerationRequest) -> str:
        text = await provider.complete(request, self._builder)
        if not text or not text.strip():
            raise ProviderError(provider.name, "empty response")
        return text.strip()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        started = self._clock()
        deadline = (
            Deadline(self._deadline_s, self._clock) if self._deadline_s else None
        )
        _log_state(ChainState.NOT_STARTED)

        try:
            attempt = await attempt_in_order(
                self._providers,
                lambda provider: self._complete(provider, request),
                retry=self._retry,
                base_delay_ms=self._base_delay_ms,
                deadline=deadline,
                on_state=_log_state,
            )
        except AllProvidersExhausted as exhausted:
            _log_state(ChainState.LOCAL_FALLBACK)
            logger.warning("All text providers exhausted, replying locally: %s", exhausted)
            content = self._responder.respond(
                request.message,
                request.profile,
                request.profile.traits,
                request.window(self._builder.history_window),
            )
            _log_state(ChainState.DONE)
            return GenerationResult(
                content=content,
                provider_used=ProviderLayer.LOCAL,
                provider_name="local",
                used_fallback=True,
                fallback_reason=str(exhausted),
                latency_ms=self._elapsed_ms(started),
            )

        _log_state(ChainState.SUCCESS, attempt.provider.name)
        layer = layer_for(attempt.index)
        _log_state(ChainState.DONE)
        return GenerationResult(
            content=attempt.value,
            provider_used=layer,
            provider_name=attempt.provider.name,
            used_fallback=layer is not ProviderLayer.PRIMARY,
            fallback_reason="; ".join(attempt.reasons) or None,
            latency_ms=self._elapsed_ms(started),
        )

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)


async def generate(
    request: GenerationRequest,
    *,
    config: Config | None = None,
    rng: random.Random | None = None,
) -> GenerationResult:
    """Generate an in-character reply with the configured provider chain."""
    if config is None:
        config = Config.from_env()

    chain = ProviderChain(
        build_text_providers(config.providers),
        responder=LocalPersonalityResponder(rng),
        builder=PromptBuilder(config.history_window),
        deadline_s=config.chat_deadline_s,
        base_delay_ms=config.base_delay_ms,
    )
    return await chain.generate(request)
