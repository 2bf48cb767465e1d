"""Tests for the CLI entry point."""

from __future__ import annotations

from click.testing import CliRunner

from amora.cli import main


def test_offline_chat_is_in_character() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["chat", "hi", "--name", "Mika", "--trait", "shy", "--offline"])
    assert result.exit_code == 0
    assert "nervous" in result.output


def test_offline_chat_seed_is_reproducible() -> None:
    runner = CliRunner()
    args = ["chat", "nice weather", "--trait", "playful", "--offline", "--seed", "3"]
    first = runner.invoke(main, args)
    second = runner.invoke(main, args)
    assert first.exit_code == 0
    assert first.output == second.output


def test_chat_without_credentials_falls_back() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["chat", "tell me about yourself", "--backstory", "I grew up near the sea."],
    )
    assert result.exit_code == 0
    assert "I grew up near the sea." in result.output


def test_chat_rejects_bad_history() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["chat", "hi", "--offline", "--history", "nonsense"])
    assert result.exit_code != 0
    assert "role:text" in result.output


def test_portrait_prompt_only() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["portrait", "--gender", "female", "--art-style", "manhwa", "--eye-color", "amber",
         "--trait", "mysterious,caring", "--prompt-only"],
    )
    assert result.exit_code == 0
    assert "manhwa style" in result.output
    assert "amber eyes" in result.output
    assert "mysterious, caring personality" in result.output
    assert "negative: low quality" in result.output


def test_portrait_without_credentials_uses_placeholder() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["portrait", "--gender", "female", "--art-style", "3d"])
    assert result.exit_code == 0
    assert "/art-styles/female 3d.jpg" in result.output


def test_providers_lists_status(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    runner = CliRunner()
    result = runner.invoke(main, ["providers"])
    assert result.exit_code == 0
    assert "text priority:  openai, huggingface" in result.output
    lines = {line.split()[0]: line for line in result.output.splitlines()[3:] if line.strip()}
    assert lines["openai"].endswith("configured")
    assert "missing HUGGING_FACE_API_KEY" in lines["huggingface"]
    assert "sk-test" not in result.output


def test_voices_fallback() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["voices"])
    assert result.exit_code == 0
    assert "Luna" in result.output
