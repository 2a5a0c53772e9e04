"""Unit tests for provider factory mappings."""

from __future__ import annotations

import pytest

from speakgenie.chat.responder import OfflineChatResponder, OpenAIChatResponder
from speakgenie.provider_factory import ProviderFactory


def test_create_responder_maps_provider_ids() -> None:
    """Known provider ids create their responder implementations."""

    openai = ProviderFactory.create_responder("openai", "gpt-4.1-mini", api_key="sk-test-key")
    offline = ProviderFactory.create_responder("offline", "ignored")

    assert isinstance(openai, OpenAIChatResponder)
    assert openai.model == "gpt-4.1-mini"
    assert openai.client.api_key == "sk-test-key"
    assert isinstance(offline, OfflineChatResponder)


def test_unknown_provider_and_backend_are_rejected() -> None:
    """Unknown identifiers raise `ValueError`."""

    with pytest.raises(ValueError, match="gemini"):
        ProviderFactory.create_responder("gemini", "model")
    with pytest.raises(ValueError, match="sapi"):
        ProviderFactory.create_speech_platform("sapi")
