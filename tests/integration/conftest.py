"""Integration-test fixtures for deterministic provider and platform behavior."""

from __future__ import annotations

import pytest

from speakgenie.chat.openai_client import OpenAIChatClient
from speakgenie.provider_factory import ProviderFactory
from tests.speech_fakes import EN_US, HI_IN, FakeSpeechPlatform


@pytest.fixture(autouse=True)
def _mock_openai_chat_calls(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mock OpenAI chat calls in integration tests to avoid network/key requirements."""

    def _mock_chat_completion(self, **kwargs: object) -> str:
        """Return deterministic tutor text that echoes the user prompt."""

        _ = self
        return f"integration-reply: {kwargs['user_prompt']}"

    monkeypatch.setattr(OpenAIChatClient, "chat_completion_text", _mock_chat_completion)


@pytest.fixture
def fake_platform(monkeypatch: pytest.MonkeyPatch) -> FakeSpeechPlatform:
    """Route CLI speech through an English/Hindi fake platform."""

    platform = FakeSpeechPlatform([EN_US, HI_IN], fail_without_exact_voice=True)
    monkeypatch.setattr(
        ProviderFactory, "create_speech_platform", lambda backend="pyttsx3": platform
    )
    return platform
