"""CLI entry point for amora."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Any

import click

from amora.config import Config
from amora.models import (
    CharacterProfile,
    ConversationTurn,
    GenerationRequest,
    ImageGenerationRequest,
)


def _character_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the character profile flags shared by ``chat`` and ``portrait``."""
    options = [
        click.option("--name", "-n", default="your companion", help="Character name"),
        click.option("--gender", "-g", default="nonbinary", help="male/female/nonbinary"),
        click.option("--trait", "-t", "traits", multiple=True, help="Personality trait (repeatable)"),
        click.option("--art-style", "-s", default="anime", help="anime/manhwa/comic/realistic/cartoon/3d"),
        click.option("--backstory", default=None, help="Character backstory"),
        click.option("--meet-cute", default=None, help="How the user met the character"),
        click.option("--height", default=None),
        click.option("--build", default=None),
        click.option("--eye-color", default=None),
        click.option("--hair-color", default=None),
        click.option("--skin-tone", default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _profile(params: dict[str, Any]) -> CharacterProfile:
    traits = [t for raw in params.pop("traits", ()) for t in raw.split(",")]
    return CharacterProfile(personality_traits=traits, **params)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log provider attempts to stderr")
def main(verbose: bool) -> None:
    """amora — in-character replies and portraits with provider fallback."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("message")
@_character_options
@click.option("--history", "-H", multiple=True, help="Prior turn as role:text (repeatable)")
@click.option("--offline", is_flag=True, help="Skip remote providers; reply locally")
@click.option("--seed", type=int, default=None, help="Seed for the local responder")
def chat(
    message: str,
    history: tuple[str, ...],
    offline: bool,
    seed: int | None,
    **character: Any,
) -> None:
    """Reply to MESSAGE in character."""
    from amora.chain import ProviderChain, generate
    from amora.responder import LocalPersonalityResponder

    turns: list[ConversationTurn] = []
    for raw in history:
        role, sep, text = raw.partition(":")
        if not sep or role.strip() not in ("user", "assistant"):
            raise click.BadParameter(f"expected role:text, got {raw!r}", param_hint="--history")
        turns.append(ConversationTurn(role=role.strip(), content=text.strip()))

    request = GenerationRequest(message=message, profile=_profile(character), history=turns)
    rng = random.Random(seed) if seed is not None else None

    if offline:
        chain = ProviderChain([], responder=LocalPersonalityResponder(rng))
        result = asyncio.run(chain.generate(request))
    else:
        result = asyncio.run(generate(request, config=Config.from_env(), rng=rng))

    click.echo(result.content)
    click.echo(f"[{result.provider_used.value}:{result.provider_name}]", err=True)
    if result.fallback_reason:
        click.echo(f"fallback: {result.fallback_reason}", err=True)


@main.command()
@_character_options
@click.option("--prompt-only", is_flag=True, help="Print the composed prompt without calling providers")
def portrait(prompt_only: bool, **character: Any) -> None:
    """Generate a portrait for a character."""
    from amora.images import ImagePromptComposer, generate_image

    profile = _profile(character)

    if prompt_only:
        prompt = ImagePromptComposer().compose(profile)
        click.echo(f"prompt: {prompt.prompt}")
        click.echo(f"negative: {prompt.negative_prompt}")
        return

    result = asyncio.run(
        generate_image(ImageGenerationRequest(profile=profile), config=Config.from_env())
    )
    click.echo(result.image_url)
    label = "placeholder" if result.is_placeholder else result.provider_name
    click.echo(f"[{label}]", err=True)
    if result.fallback_reason:
        click.echo(f"fallback: {result.fallback_reason}", err=True)


@main.command()
def providers() -> None:
    """Show each vendor preset and whether it is configured."""
    from vendorkit import PROVIDERS

    config = Config.from_env().providers
    click.echo(f"text priority:  {', '.join(config.text_priority) or '(none)'}")
    click.echo(f"image priority: {', '.join(config.image_priority) or '(none)'}\n")

    for info in PROVIDERS.values():
        missing = config.missing_keys(info)
        status = "configured" if not missing else f"missing {', '.join(missing)}"
        click.echo(f"  {info.name:<18} {info.kind:<6} {config.model_for(info):<32} {status}")


@main.command()
def voices() -> None:
    """List available voices."""
    from amora.voices import list_voices

    catalog = asyncio.run(list_voices(Config.from_env()))
    if catalog.message:
        click.echo(catalog.message, err=True)
    for voice in catalog.voices:
        click.echo(
            f"  {voice.voice_id:<24} {voice.name:<12} {voice.gender:<8} "
            f"{voice.accent:<10} {voice.description}"
        )


if __name__ == "__main__":
    main()
