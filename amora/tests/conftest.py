"""Shared fixtures: a fake clock whose sleep advances time instantly."""

from __future__ import annotations

import pytest


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials out of every test."""
    for key in (
        "OPENAI_API_KEY",
        "HUGGING_FACE_API_KEY",
        "REPLICATE_API_KEY",
        "PICA_SECRET_KEY",
        "PICA_OPENAI_CONNECTION_KEY",
        "ELEVENLABS_API_KEY",
        "AMORA_TEXT_PROVIDERS",
        "AMORA_IMAGE_PROVIDERS",
        "AMORA_OPENAI_MODEL",
        "AMORA_HF_TEXT_MODEL",
        "AMORA_HF_IMAGE_MODEL",
        "AMORA_HISTORY_WINDOW",
        "AMORA_CHAT_DEADLINE",
        "AMORA_IMAGE_DEADLINE",
        "AMORA_BASE_DELAY_MS",
    ):
        monkeypatch.delenv(key, raising=False)
