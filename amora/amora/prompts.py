"""Prompt construction for generative text providers."""

from __future__ import annotations

from collections.abc import Sequence

from amora.models import CharacterProfile, ConversationTurn, GenerationRequest

_RESPONSE_RULES = (
    "Respond in character, keep the response under ~200 words, "
    "remain consistent with stated personality and history."
)


class PromptBuilder:
    """Turns a character profile and conversation window into provider input.

    Never raises: optional profile fields that are missing are simply left
    out of the prompt.
    """

    def __init__(self, history_window: int = 8) -> None:
        self.history_window = history_window

    def build_system_prompt(
        self,
        profile: CharacterProfile,
        traits: Sequence[str] | None = None,
    ) -> str:
        """Return the system prompt describing *profile*."""
        traits = profile.traits if traits is None else traits
        lines = [
            f"You are {profile.name}, a {profile.gender} companion character "
            "chatting with the user.",
        ]
        if traits:
            lines.append(f"Personality traits: {', '.join(traits)}.")
        if profile.backstory and profile.backstory.strip():
            lines.append(f"Backstory: {profile.backstory.strip()}")
        if profile.meet_cute and profile.meet_cute.strip():
            lines.append(f"How you met the user: {profile.meet_cute.strip()}")
        lines.append(_RESPONSE_RULES)
        return "\n".join(lines)

    def build_user_turn(self, message: str) -> ConversationTurn:
        return ConversationTurn(role="user", content=message)

    def build_messages(self, request: GenerationRequest) -> list[dict[str, str]]:
        """Chat-completion message list: system, bounded window, new turn."""
        messages = [
            {"role": "system", "content": self.build_system_prompt(request.profile)},
        ]
        for turn in request.window(self.history_window):
            messages.append({"role": turn.role, "content": turn.content})
        turn = self.build_user_turn(request.message)
        messages.append({"role": turn.role, "content": turn.content})
        return messages

    def build_dialogue(self, request: GenerationRequest) -> str:
        """Flattened transcript for plain text-generation endpoints."""
        name = request.profile.name
        lines = [self.build_system_prompt(request.profile), ""]
        for turn in [*request.window(self.history_window), self.build_user_turn(request.message)]:
            speaker = "User" if turn.role == "user" else name
            lines.append(f"{speaker}: {turn.content}")
        lines.append(f"{name}:")
        return "\n".join(lines)
