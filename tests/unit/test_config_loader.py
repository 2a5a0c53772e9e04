"""Unit tests for YAML/env config loading and runtime precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from speakgenie.config import ConfigLoader, RuntimeConfigSources, SpeakGenieConfig
from speakgenie.speech.policy import DEFAULT_POLICY


def _write_yaml(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "speakgenie.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_from_yaml_loads_session_and_policy_values(tmp_path: Path) -> None:
    """YAML values should populate the config and build a custom voice policy."""

    config_path = _write_yaml(
        tmp_path,
        "\n".join(
            [
                "language: mr-IN",
                "scenario: restaurant",
                "speech_rate: 0.8",
                "speech_pitch: 1.2",
                "speech_volume: '0.9'",
                "chat_provider: offline",
                "voice: com.apple.lekha",
                "voice_policy:",
                "  universal_language: en",
                "  last_resort_locale: en-IN",
                "  substitute_before_family: yes",
                "  substitutes:",
                "    mr-IN: hi-IN",
                "    pa-IN: hi-IN",
                "  regional_families:",
                "    indic: [hi, mr, pa]",
                "extra:",
                "  classroom: 4B",
            ]
        ),
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.language == "mr"
    assert config.locale == "mr-IN"
    assert config.scenario == "restaurant"
    assert (config.speech_rate, config.speech_pitch, config.speech_volume) == (0.8, 1.2, 0.9)
    assert config.chat_provider == "offline"
    assert config.voice == "com.apple.lekha"
    assert config.voice_policy.last_resort_locale == "en-IN"
    assert config.voice_policy.substitute_before_family is True
    assert config.voice_policy.substitute_for("pa-IN") == "hi-IN"
    assert config.voice_policy.family_of("pa-IN") == frozenset({"hi", "mr", "pa"})
    assert config.extra == {"classroom": "4B"}


def test_from_yaml_empty_file_uses_defaults(tmp_path: Path) -> None:
    """An empty YAML document yields the default English free-chat config."""

    config = ConfigLoader.from_yaml(_write_yaml(tmp_path, ""))

    assert config.language == "en"
    assert config.scenario == "free-chat"
    assert config.voice_policy == DEFAULT_POLICY


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- en\n- hi\n", "top-level mapping"),
        ("input_pdf: book.pdf\n", "unsupported key"),
        ("language: fr\n", "Unsupported `language`"),
        ("scenario: library\n", "Unsupported `scenario`"),
        ("chat_provider: gemini\n", "Unsupported `chat_provider`"),
        ("speech_rate: fast\n", "speech_rate"),
        ("voice_policy: [en]\n", "voice_policy"),
        ("voice_policy:\n  fallback: en\n", "unsupported key"),
        ("voice_policy:\n  substitute_before_family: sometimes\n", "boolean"),
        ("voice_policy:\n  regional_families:\n    indic: []\n", "non-empty list"),
    ],
)
def test_from_yaml_rejects_invalid_values(tmp_path: Path, text: str, message: str) -> None:
    """Invalid YAML shapes and values should raise descriptive `ValueError`s."""

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(_write_yaml(tmp_path, text))


def test_from_env_reads_speakgenie_variables() -> None:
    """Environment variables configure the session and chat runtime sources."""

    config = ConfigLoader.from_env(
        {
            "SPEAKGENIE_LANGUAGE": "hi",
            "SPEAKGENIE_SCENARIO": "airport",
            "SPEAKGENIE_SPEECH_RATE": "1.5",
            "SPEAKGENIE_CHAT_PROVIDER": "offline",
            "SPEAKGENIE_VOICE": "rishi",
            "OPENAI_API_KEY": "env-key",
            "UNRELATED": "x",
        }
    )

    assert config.language == "hi"
    assert config.scenario == "airport"
    assert config.speech_rate == 1.5
    assert config.speech_pitch == 1.1
    assert config.chat_provider == "offline"
    assert config.api_key == "env-key"
    assert config.voice == "rishi"
    assert dict(config.runtime_sources.env) == {
        "SPEAKGENIE_CHAT_PROVIDER": "offline",
        "OPENAI_API_KEY": "env-key",
    }


def test_from_env_rejects_non_numeric_speech_values() -> None:
    """Speech values from the environment must be numeric."""

    with pytest.raises(ValueError, match="SPEAKGENIE_SPEECH_VOLUME"):
        ConfigLoader.from_env({"SPEAKGENIE_SPEECH_VOLUME": "loud"})


def test_chat_runtime_precedence_cli_secure_env_config() -> None:
    """CLI values beat secure storage, which beats env, which beats config fields."""

    config = SpeakGenieConfig(api_key="config-key", chat_model="config-model")

    runtime = config.resolved_chat_runtime(
        RuntimeConfigSources(
            cli={"chat_model": "cli-model"},
            secure={"api_key": "secure-key"},
            env={"OPENAI_API_KEY": "env-key", "SPEAKGENIE_CHAT_PROVIDER": "offline"},
        )
    )

    assert runtime.model == "cli-model"
    assert runtime.api_key == "secure-key"
    assert runtime.provider == "offline"


def test_chat_runtime_falls_back_to_config_values() -> None:
    """Without runtime sources the config fields are used."""

    runtime = SpeakGenieConfig(api_key="config-key").resolved_chat_runtime(RuntimeConfigSources())

    assert runtime.provider == "openai"
    assert runtime.model == "gpt-4.1-mini"
    assert runtime.api_key == "config-key"


def test_chat_runtime_rejects_unknown_provider_from_cli() -> None:
    """An unsupported provider from any source is rejected."""

    with pytest.raises(ValueError, match="chat_provider"):
        SpeakGenieConfig().resolved_chat_runtime(
            RuntimeConfigSources(cli={"chat_provider": "gemini"})
        )
