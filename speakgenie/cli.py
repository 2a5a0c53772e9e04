"""Command-line interface for SpeakGenie.

Responsibilities:
- Expose catalog listings and voice diagnostics for the local speech platform.
- Speak one-off text and run typed-transcript practice conversations.
- Manage the securely stored provider API key.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .catalog.languages import SUPPORTED_LANGUAGES, get_language_by_id, get_language_by_locale
from .catalog.scenarios import SCENARIOS, get_scenario_by_id
from .chat.session import ChatService
from .cli_rendering import (
    echo_fallback_chain,
    echo_language_list,
    echo_message,
    echo_scenario_list,
    echo_speech_outcome,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import apply_session_overrides, load_base_config, resolve_chat_runtime_sources
from .conversation import VoiceConversation
from .credentials import create_credential_store
from .errors import CommandStageError
from .models.datatypes import SpeechResult
from .parsing import normalize_locale_tag, normalize_optional_string
from .provider_factory import ProviderFactory
from .speech.controller import SpeechController
from .speech.platform import SpeechPlatform
from .speech.voice_catalog import VoiceCatalog
from .telemetry.logger import configure_logging

app = typer.Typer(
    name="speakgenie",
    no_args_is_help=True,
    help="SpeakGenie voice tutor CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Optional YAML config file (`speakgenie.yaml`)."),
]
LanguageOption = Annotated[
    str | None,
    typer.Option("--language", "-l", help="Language id (`hi`) or locale tag (`hi-IN`)."),
]
RateOption = Annotated[
    float | None, typer.Option("--rate", help="Speech rate, clamped to [0.1, 10].")
]
PitchOption = Annotated[
    float | None, typer.Option("--pitch", help="Speech pitch, clamped to [0, 2].")
]
VolumeOption = Annotated[
    float | None, typer.Option("--volume", help="Speech volume, clamped to [0, 1].")
]
VoiceOption = Annotated[
    str | None,
    typer.Option(
        "--voice",
        help="Pin a platform voice id (see `speakgenie voices`); used for its own locale.",
    ),
]


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Emit debug speech and chat events to stderr."),
    ] = False,
) -> None:
    """SpeakGenie voice tutor CLI."""

    configure_logging(level="DEBUG" if verbose else "WARNING")


def _create_speech_platform() -> SpeechPlatform:
    """Create the speech platform and map backend failures to stage errors."""

    try:
        return ProviderFactory.create_speech_platform()
    except Exception as exc:
        raise CommandStageError(
            stage="speech",
            detail=f"Speech platform is unavailable: {exc}",
            hint="Install a system speech engine (e.g. eSpeak NG on Linux) and retry.",
        ) from exc


def _diagnostic_locale(language: str) -> str:
    """Map a language id or catalog locale to its locale; pass other tags through."""

    catalog_language = get_language_by_id(language) or get_language_by_locale(language)
    if catalog_language is not None:
        return catalog_language.locale
    return normalize_locale_tag(language)


@app.command("languages")
def languages_command() -> None:
    """List supported practice languages."""

    echo_language_list(SUPPORTED_LANGUAGES)


@app.command("scenarios")
def scenarios_command() -> None:
    """List practice scenarios."""

    echo_scenario_list(SCENARIOS)


@app.command("voices")
def voices_command(
    language: LanguageOption = None,
    voice: VoiceOption = None,
    config_file: ConfigOption = None,
) -> None:
    """List platform voices and, with `--language`, the resolved fallback chain."""

    try:
        config = load_base_config(config_file)
        platform = _create_speech_platform()
        catalog = VoiceCatalog(platform, policy=config.voice_policy)
        controller = SpeechController(
            platform, catalog, preferred_voice_id=normalize_optional_string(voice) or config.voice
        )
    except Exception as exc:
        exit_with_command_error("voices", exc)

    echo_voice_list(catalog.voices)
    normalized_language = normalize_optional_string(language)
    if normalized_language is None:
        return
    locale = _diagnostic_locale(normalized_language)
    echo_fallback_chain(
        locale, controller.resolve_primary(locale), controller.build_fallback_chain(locale)
    )


@app.command("say")
def say_command(
    text: Annotated[str, typer.Argument(help="Text to speak.")],
    language: LanguageOption = None,
    rate: RateOption = None,
    pitch: PitchOption = None,
    volume: VolumeOption = None,
    voice: VoiceOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Speak text once through the voice fallback chain."""

    try:
        config = apply_session_overrides(
            load_base_config(config_file),
            language=language,
            rate=rate,
            pitch=pitch,
            volume=volume,
            voice=voice,
        )
        platform = _create_speech_platform()
        controller = SpeechController(
            platform,
            VoiceCatalog(platform, policy=config.voice_policy),
            preferred_voice_id=config.voice,
        )
        request_id = controller.speak(
            text,
            config.locale,
            rate=config.speech_rate,
            pitch=config.speech_pitch,
            volume=config.speech_volume,
        )
        if request_id is None:
            raise CommandStageError(
                stage="input",
                detail="Nothing to say: text is blank.",
                hint="Pass non-empty text, e.g. `speakgenie say \"Namaste\" -l hi`.",
            )
        platform.run_until_idle()
    except Exception as exc:
        exit_with_command_error("say", exc)

    outcome = controller.last_result
    if isinstance(outcome, SpeechResult):
        echo_speech_outcome(outcome)
        return
    attempts = len(outcome.attempted) if outcome is not None else 0
    exit_with_command_error(
        "say",
        CommandStageError(
            stage="speech",
            detail=f"No voice could speak `{config.locale}` after {attempts} attempt(s).",
            hint="Run `speakgenie voices --language <id>` to inspect available voices.",
        ),
    )


@app.command("chat")
def chat_command(
    language: LanguageOption = None,
    scenario: Annotated[
        str | None,
        typer.Option("--scenario", "-s", help="Scenario id (see `speakgenie scenarios`)."),
    ] = None,
    chat_provider: Annotated[
        str | None,
        typer.Option("--chat-provider", help="Tutor reply provider (`openai` or `offline`)."),
    ] = None,
    chat_model: Annotated[
        str | None, typer.Option("--chat-model", help="Chat model id override.")
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="OpenAI API key override for this run."),
    ] = None,
    prompt_api_key: Annotated[
        bool,
        typer.Option("--prompt-api-key", help="Prompt for the API key with hidden input."),
    ] = False,
    store_api_key: Annotated[
        bool,
        typer.Option(
            "--store-api-key",
            help="Persist a CLI-entered API key to secure credential storage.",
        ),
    ] = False,
    mute: Annotated[
        bool, typer.Option("--mute", help="Start with spoken replies turned off.")
    ] = False,
    rate: RateOption = None,
    pitch: PitchOption = None,
    volume: VolumeOption = None,
    voice: VoiceOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Practice a conversation; type what you would say, replies are spoken."""

    try:
        config = apply_session_overrides(
            load_base_config(config_file),
            language=language,
            scenario=scenario,
            rate=rate,
            pitch=pitch,
            volume=volume,
            voice=voice,
        )
        runtime_sources = resolve_chat_runtime_sources(
            chat_provider=chat_provider,
            chat_model=chat_model,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            credential_store_factory=create_credential_store,
        )
        runtime = config.resolved_chat_runtime(runtime_sources)
        responder = ProviderFactory.create_responder(runtime.provider, runtime.model, runtime.api_key)
        platform = _create_speech_platform()
        controller = SpeechController(
            platform,
            VoiceCatalog(platform, policy=config.voice_policy),
            on_failure=echo_speech_outcome,
            preferred_voice_id=config.voice,
        )
        conversation = VoiceConversation.start(
            ChatService(responder),
            controller,
            config.scenario,
            config.locale,
            rate=config.speech_rate,
            pitch=config.speech_pitch,
            volume=config.speech_volume,
            muted=mute,
        )
    except Exception as exc:
        exit_with_command_error("chat", exc)

    language_config = config.language_config
    scenario_config = get_scenario_by_id(config.scenario)
    scenario_name = scenario_config.name if scenario_config is not None else config.scenario
    typer.echo(
        f"Practice: {scenario_name} in {language_config.name} ({language_config.locale}). "
        "Commands: /mute, /stop, /quit."
    )
    for message in conversation.transcript:
        echo_message(message)
    platform.run_until_idle()

    while True:
        try:
            transcript = typer.prompt("You", default="", show_default=False)
        except typer.Abort:
            break
        command = transcript.strip().lower()
        if command in {"/quit", "/exit"}:
            break
        if command == "/mute":
            muted = conversation.toggle_mute()
            typer.echo("Voice replies muted." if muted else "Voice replies on.")
            continue
        if command == "/stop":
            controller.stop()
            continue
        try:
            exchange = conversation.handle_transcript(transcript)
        except Exception as exc:
            exit_with_command_error("chat", exc)
        if exchange is None:
            continue
        echo_message(exchange.ai_message)
        platform.run_until_idle()

    controller.stop()
    typer.echo("Goodbye!")


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage securely stored CLI credentials."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            CommandStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "OpenAI API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                CommandStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                CommandStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        removed = credential_store.clear_api_key()
        if removed:
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    has_stored_key = credential_store.get_api_key() is not None
    status = "present" if has_stored_key else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored OpenAI API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
