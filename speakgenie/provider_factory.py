"""Provider factory helpers for tutor replies and speech platforms.

Responsibilities:
- Resolve provider identifiers to concrete responder implementations.
- Resolve speech backend identifiers to concrete platform adapters.

Notes:
- Factory mappings are explicit so CLI wiring stays independent from
  concrete class construction and tests can monkeypatch a single seam.
"""

from __future__ import annotations

from .chat.responder import ChatResponder, OfflineChatResponder, OpenAIChatResponder
from .speech.platform import Pyttsx3Platform, SpeechPlatform


class ProviderFactory:
    """Factory for provider-backed clients used by the CLI."""

    @staticmethod
    def create_responder(
        provider_id: str,
        model: str,
        api_key: str | None = None,
    ) -> ChatResponder:
        """Create a tutor responder for a configured provider identifier."""

        if provider_id == "openai":
            return OpenAIChatResponder(model=model, api_key=api_key)
        if provider_id == "offline":
            return OfflineChatResponder()
        raise ValueError(f"Unsupported chat provider `{provider_id}`.")

    @staticmethod
    def create_speech_platform(backend: str = "pyttsx3") -> SpeechPlatform:
        """Create a speech platform adapter for a backend identifier."""

        if backend == "pyttsx3":
            return Pyttsx3Platform()
        raise ValueError(f"Unsupported speech backend `{backend}`.")
