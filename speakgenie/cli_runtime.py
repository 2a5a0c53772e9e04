"""CLI runtime resolution helpers.

This module isolates API-key prompting, runtime source assembly, secure
API-key persistence, and the effective session config from command wiring.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Callable, Protocol

import typer

from .config import ConfigLoader, RuntimeConfigSources, SpeakGenieConfig, normalize_language
from .credentials import create_credential_store
from .errors import CommandStageError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by runtime resolution."""

    def get_api_key(self) -> str | None:
        """Return currently stored API key, if available."""

    def set_api_key(self, api_key: str) -> None:
        """Persist API key value in secure storage."""


def load_base_config(config_path: Path | None) -> SpeakGenieConfig:
    """Load YAML config when requested, else environment config; map failures to stage errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise CommandStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix the `SPEAKGENIE_*` environment variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def apply_session_overrides(
    base_config: SpeakGenieConfig,
    *,
    language: str | None = None,
    scenario: str | None = None,
    rate: float | None = None,
    pitch: float | None = None,
    volume: float | None = None,
    voice: str | None = None,
) -> SpeakGenieConfig:
    """Apply explicit CLI session options over loaded config and validate the result."""

    overrides: dict[str, object] = {}
    normalized_language = normalize_optional_string(language)
    if normalized_language is not None:
        overrides["language"] = normalize_language(normalized_language)
    normalized_scenario = normalize_optional_string(scenario)
    if normalized_scenario is not None:
        overrides["scenario"] = normalized_scenario
    if rate is not None:
        overrides["speech_rate"] = rate
    if pitch is not None:
        overrides["speech_pitch"] = pitch
    if volume is not None:
        overrides["speech_volume"] = volume
    normalized_voice = normalize_optional_string(voice)
    if normalized_voice is not None:
        overrides["voice"] = normalized_voice

    config = replace(base_config, **overrides)
    try:
        config.validate()
    except ValueError as exc:
        raise CommandStageError(
            stage="config",
            detail=str(exc),
            hint="Run `speakgenie languages` or `speakgenie scenarios` for valid ids.",
        ) from exc
    return config


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: str | None,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def resolve_chat_runtime_sources(
    chat_provider: str | None,
    chat_model: str | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> RuntimeConfigSources:
    """Resolve CLI, secure, and environment source mappings for chat settings."""

    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "chat_provider", chat_provider)
    _set_runtime_cli_value(runtime_cli_values, "chat_model", chat_model)
    _set_runtime_cli_value(runtime_cli_values, "api_key", api_key)

    api_key_entered_in_run = "api_key" in runtime_cli_values
    if prompt_api_key and "api_key" not in runtime_cli_values:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "OpenAI API key (hidden; leave blank to skip)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is not None:
            runtime_cli_values["api_key"] = prompted_api_key
            api_key_entered_in_run = True

    credential_store = credential_store_factory()
    runtime_secure_values: dict[str, str] = {}
    stored_api_key = credential_store.get_api_key()
    if stored_api_key is not None:
        runtime_secure_values["api_key"] = stored_api_key

    if api_key_entered_in_run and store_api_key:
        try:
            credential_store.set_api_key(runtime_cli_values["api_key"])
            typer.echo("Stored API key in secure credential storage.")
        except Exception as exc:
            raise CommandStageError(
                stage="credentials",
                detail=f"Failed to store API key securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun without "
                    "`--store-api-key` for one-off usage."
                ),
            ) from exc

    return RuntimeConfigSources(
        cli=runtime_cli_values,
        secure=runtime_secure_values,
        env=dict(os.environ),
    )
