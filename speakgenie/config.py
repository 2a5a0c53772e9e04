"""Configuration model and loaders for SpeakGenie.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Resolve chat provider settings with deterministic source precedence.
- Load configuration from YAML files and environment variables.

Key types:
- `SpeakGenieConfig`: normalized settings for one CLI session.
- `ChatRuntimeConfig`: resolved chat provider, model, and API key.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `SpeakGenieConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .catalog.languages import get_language_by_id, get_language_by_locale
from .catalog.scenarios import FREE_CHAT_SCENARIO_ID, is_known_scenario
from .models.datatypes import DEFAULT_PITCH, DEFAULT_RATE, DEFAULT_VOLUME, LanguageConfig
from .parsing import normalize_optional_string, parse_optional_float, parse_permissive_boolean
from .speech.policy import DEFAULT_POLICY, VoicePolicy


_DEFAULT_CHAT_MODEL = "gpt-4.1-mini"
_SUPPORTED_CHAT_PROVIDERS = frozenset({"openai", "offline"})


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChatRuntimeConfig:
    """Resolved chat provider settings for one session."""

    provider: str
    model: str
    api_key: str | None = None


@dataclass(slots=True)
class SpeakGenieConfig:
    """Runtime configuration for one SpeakGenie session.

    Attributes:
        language: Catalog language id (`en`, `hi`, `mr`, ...).
        scenario: Scenario id, `free-chat` by default.
        speech_rate: Utterance rate; clamped to `[0.1, 10]` when speaking.
        speech_pitch: Utterance pitch; clamped to `[0, 2]` when speaking.
        speech_volume: Utterance volume; clamped to `[0, 1]` when speaking.
        chat_provider: Tutor reply provider (`openai` or `offline`).
        chat_model: Chat model identifier.
        api_key: Optional provider API key.
        voice: Optional pinned platform voice id, used when it speaks the
            session locale.
        voice_policy: Voice fallback policy.
        runtime_sources: Optional runtime source overrides injected by the CLI.
        extra: Additional metadata for future extensions.
    """

    language: str = "en"
    scenario: str = FREE_CHAT_SCENARIO_ID
    speech_rate: float = DEFAULT_RATE
    speech_pitch: float = DEFAULT_PITCH
    speech_volume: float = DEFAULT_VOLUME
    chat_provider: str = "openai"
    chat_model: str = _DEFAULT_CHAT_MODEL
    api_key: str | None = None
    voice: str | None = None
    voice_policy: VoicePolicy = DEFAULT_POLICY
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate configuration values before a session starts."""

        if get_language_by_id(self.language) is None:
            raise ValueError(f"Unsupported `language` value `{self.language}`.")
        if not is_known_scenario(self.scenario):
            raise ValueError(f"Unsupported `scenario` value `{self.scenario}`.")
        self._validate_provider(self.chat_provider)
        if not self.chat_model.strip():
            raise ValueError("`chat_model` must be a non-empty string.")

    @property
    def language_config(self) -> LanguageConfig:
        """Return the catalog entry for the configured language."""

        language = get_language_by_id(self.language)
        if language is None:
            raise ValueError(f"Unsupported `language` value `{self.language}`.")
        return language

    @property
    def locale(self) -> str:
        """Return the locale tag used for recognition and synthesis."""

        return self.language_config.locale

    def resolved_chat_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ChatRuntimeConfig:
        """Resolve chat settings with precedence `cli` > `secure` > `env` > config."""

        resolved_sources = sources if sources is not None else self.runtime_sources
        provider = self._resolve(
            "chat_provider", "SPEAKGENIE_CHAT_PROVIDER", self.chat_provider, resolved_sources
        )
        model = self._resolve(
            "chat_model", "SPEAKGENIE_CHAT_MODEL", self.chat_model, resolved_sources
        )
        api_key = self._resolve("api_key", "OPENAI_API_KEY", self.api_key, resolved_sources)
        if provider is None:
            raise ValueError("`chat_provider` could not be resolved.")
        if model is None:
            raise ValueError("`chat_model` could not be resolved.")
        self._validate_provider(provider)
        return ChatRuntimeConfig(provider=provider, model=model, api_key=api_key)

    @staticmethod
    def _resolve(
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, env_key),
        ):
            value = normalize_optional_string(mapping.get(lookup_key))
            if value is not None:
                return value
        return normalize_optional_string(default_value)

    @staticmethod
    def _validate_provider(provider_id: str) -> None:
        if provider_id not in _SUPPORTED_CHAT_PROVIDERS:
            supported = ", ".join(sorted(_SUPPORTED_CHAT_PROVIDERS))
            raise ValueError(
                f"Unsupported `chat_provider` value `{provider_id}`; supported: {supported}."
            )


def normalize_language(value: str) -> str:
    """Map a language id or locale tag to its catalog id; unknown values pass through."""

    if get_language_by_id(value) is not None:
        return value
    language = get_language_by_locale(value)
    return language.id if language is not None else value


class ConfigLoader:
    """Factory methods for creating `SpeakGenieConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "language",
            "scenario",
            "speech_rate",
            "speech_pitch",
            "speech_volume",
            "chat_provider",
            "chat_model",
            "api_key",
            "voice",
            "voice_policy",
            "extra",
        }
    )
    _SUPPORTED_POLICY_KEYS = frozenset(
        {
            "universal_language",
            "last_resort_locale",
            "regional_families",
            "substitutes",
            "substitute_before_family",
        }
    )
    _RUNTIME_ENV_KEYS = frozenset(
        {"SPEAKGENIE_CHAT_PROVIDER", "SPEAKGENIE_CHAT_MODEL", "OPENAI_API_KEY"}
    )

    @staticmethod
    def from_yaml(path: Path) -> SpeakGenieConfig:
        """Create a validated config from a YAML file."""

        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> SpeakGenieConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        defaults = SpeakGenieConfig()

        def _env(key: str) -> str | None:
            return normalize_optional_string(env_map.get(key))

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }
        config = SpeakGenieConfig(
            language=normalize_language(_env("SPEAKGENIE_LANGUAGE") or defaults.language),
            scenario=_env("SPEAKGENIE_SCENARIO") or defaults.scenario,
            speech_rate=ConfigLoader._env_float(env_map, "SPEAKGENIE_SPEECH_RATE", DEFAULT_RATE),
            speech_pitch=ConfigLoader._env_float(
                env_map, "SPEAKGENIE_SPEECH_PITCH", DEFAULT_PITCH
            ),
            speech_volume=ConfigLoader._env_float(
                env_map, "SPEAKGENIE_SPEECH_VOLUME", DEFAULT_VOLUME
            ),
            chat_provider=_env("SPEAKGENIE_CHAT_PROVIDER") or defaults.chat_provider,
            chat_model=_env("SPEAKGENIE_CHAT_MODEL") or defaults.chat_model,
            api_key=_env("OPENAI_API_KEY"),
            voice=_env("SPEAKGENIE_VOICE"),
            runtime_sources=RuntimeConfigSources(env=runtime_env),
        )
        config.validate()
        return config

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> SpeakGenieConfig:
        """Build a validated config from a parsed YAML mapping."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            raise ValueError(f"{source_label} includes unsupported key(s): {', '.join(unknown)}.")

        defaults = SpeakGenieConfig()
        language = normalize_optional_string(payload.get("language")) or defaults.language
        config = SpeakGenieConfig(
            language=normalize_language(language),
            scenario=normalize_optional_string(payload.get("scenario")) or defaults.scenario,
            speech_rate=ConfigLoader._optional_float(
                payload, "speech_rate", source_label, DEFAULT_RATE
            ),
            speech_pitch=ConfigLoader._optional_float(
                payload, "speech_pitch", source_label, DEFAULT_PITCH
            ),
            speech_volume=ConfigLoader._optional_float(
                payload, "speech_volume", source_label, DEFAULT_VOLUME
            ),
            chat_provider=(
                normalize_optional_string(payload.get("chat_provider")) or defaults.chat_provider
            ),
            chat_model=normalize_optional_string(payload.get("chat_model")) or defaults.chat_model,
            api_key=normalize_optional_string(payload.get("api_key")),
            voice=normalize_optional_string(payload.get("voice")),
            voice_policy=ConfigLoader._voice_policy(payload.get("voice_policy"), source_label),
            extra=ConfigLoader._string_map(payload.get("extra"), "extra", source_label),
        )
        config.validate()
        return config

    @staticmethod
    def _voice_policy(raw: object, source_label: str) -> VoicePolicy:
        """Build a voice policy from an optional YAML mapping over the defaults."""

        if raw is None:
            return DEFAULT_POLICY
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `voice_policy` must be a mapping/object.")
        unknown = sorted(set(raw).difference(ConfigLoader._SUPPORTED_POLICY_KEYS))
        if unknown:
            raise ValueError(
                f"{source_label} field `voice_policy` includes unsupported key(s): "
                f"{', '.join(unknown)}."
            )

        overrides: dict[str, Any] = {}
        for key in ("universal_language", "last_resort_locale"):
            if key in raw:
                value = normalize_optional_string(raw[key])
                if value is None:
                    raise ValueError(f"{source_label} field `voice_policy.{key}` is blank.")
                overrides[key] = value
        if "substitutes" in raw:
            overrides["substitutes"] = ConfigLoader._string_map(
                raw["substitutes"], "voice_policy.substitutes", source_label
            )
        if "regional_families" in raw:
            families = raw["regional_families"]
            if not isinstance(families, Mapping):
                raise ValueError(
                    f"{source_label} field `voice_policy.regional_families` must be a mapping."
                )
            parsed_families: dict[str, frozenset[str]] = {}
            for name, members in families.items():
                if not isinstance(members, list | tuple) or not members:
                    raise ValueError(
                        f"{source_label} family `{name}` must be a non-empty list of languages."
                    )
                parsed_families[str(name)] = frozenset(
                    str(member).strip() for member in members if str(member).strip()
                )
            overrides["regional_families"] = parsed_families
        if "substitute_before_family" in raw:
            parsed = parse_permissive_boolean(raw["substitute_before_family"])
            if parsed is None:
                raise ValueError(
                    f"{source_label} field `voice_policy.substitute_before_family` must be a "
                    "boolean value (`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            overrides["substitute_before_family"] = parsed
        return VoicePolicy(**overrides)

    @staticmethod
    def _optional_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        try:
            parsed = parse_optional_float(payload.get(key), key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a number.") from exc
        return default if parsed is None else parsed

    @staticmethod
    def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
        try:
            parsed = parse_optional_float(env.get(key), key)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a number.") from exc
        return default if parsed is None else parsed

    @staticmethod
    def _string_map(raw: object, key: str, source_label: str) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank key.")
            if value_value is None:
                raise ValueError(
                    f"{source_label} field `{key}` contains blank value for `{key_value}`."
                )
            normalized[key_value] = value_value
        return normalized
