"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
catalog listings, voice diagnostics, chat transcripts, and speech outcomes.
"""

from __future__ import annotations

from typing import NoReturn, Sequence

import typer

from .errors import CommandStageError
from .models.datatypes import (
    ChatMessage,
    FallbackCandidate,
    LanguageConfig,
    Scenario,
    SpeechFailure,
    SpeechResult,
    Voice,
)
from .speech.voice_catalog import VoiceMatch


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_language_list(languages: Sequence[LanguageConfig]) -> None:
    """Print one row per supported language."""

    for language in languages:
        typer.echo(
            f"{language.id}\t{language.locale}\t{language.name} ({language.native_name})"
            f"\t{language.description}"
        )


def echo_scenario_list(scenarios: Sequence[Scenario]) -> None:
    """Print one row per practice scenario with its example phrases."""

    for scenario in scenarios:
        typer.echo(f"{scenario.id}\t{scenario.name}\t{scenario.description}")
        for example in scenario.examples:
            typer.echo(f"  - {example}")


def _voice_label(voice: Voice | None) -> str:
    if voice is None:
        return "(platform default)"
    return f"{voice.name} [{voice.locale or 'unknown'}]"


def echo_voice_list(voices: Sequence[Voice]) -> None:
    """Print the platform voices in catalog order, marking the default."""

    if not voices:
        typer.echo("No voices reported by the speech platform.")
        return
    for index, voice in enumerate(voices, start=1):
        marker = " (default)" if voice.default else ""
        typer.echo(f"{index}. {voice.name}\t{voice.locale or 'unknown'}\t{voice.voice_id}{marker}")


def echo_fallback_chain(
    locale: str,
    match: VoiceMatch | None,
    chain: Sequence[FallbackCandidate],
) -> None:
    """Print the resolved voice and ordered fallback candidates for a locale."""

    if match is None:
        typer.echo(f"Resolved voice for {locale}: none")
    else:
        typer.echo(f"Resolved voice for {locale}: {_voice_label(match.voice)} via {match.rule}")
    typer.echo("Fallback chain:")
    for index, candidate in enumerate(chain, start=1):
        typer.echo(
            f"  {index}. {candidate.tier}: {_voice_label(candidate.voice)} as {candidate.locale}"
        )


def echo_message(message: ChatMessage) -> None:
    """Print one transcript line."""

    speaker = "You" if message.sender == "user" else "SpeakGenie"
    typer.echo(f"{speaker}: {message.text}")


def echo_speech_outcome(outcome: SpeechResult | SpeechFailure | None) -> None:
    """Print how the last utterance settled."""

    if outcome is None:
        return
    if isinstance(outcome, SpeechResult):
        typer.echo(
            f"Spoken with {_voice_label(outcome.candidate.voice)} as "
            f"{outcome.candidate.locale} ({outcome.candidate.tier}, "
            f"attempts={outcome.attempts})."
        )
        return
    typer.secho(
        f"Speech unavailable for {outcome.request.locale} after "
        f"{len(outcome.attempted)} attempt(s); showing text only.",
        fg=typer.colors.YELLOW,
        err=True,
    )
