"""Tutor reply providers.

Responsibilities:
- Define the protocol the chat service uses to obtain tutor messages.
- Provide an OpenAI-backed responder that degrades to canned scenario replies.
- Provide a deterministic offline responder for keyless use and tests.
"""

from __future__ import annotations

import random
from typing import Protocol

from ..telemetry.logger import ChatEventLogger
from .openai_client import OpenAIChatClient, OpenAIProviderError
from .prompts import PromptLibrary


class ChatResponder(Protocol):
    """Protocol for tutor reply providers."""

    provider_id: str

    def welcome(self, scenario: str, locale: str) -> str:
        """Return the opening tutor message for a new session."""

    def reply(self, message: str, scenario: str, locale: str) -> str:
        """Return the tutor reply to one user message."""


class OpenAIChatResponder:
    """Tutor replies from OpenAI chat-completions with canned fallbacks."""

    provider_id = "openai"

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        api_key: str | None = None,
        client: OpenAIChatClient | None = None,
        chooser: random.Random | None = None,
        event_logger: ChatEventLogger | None = None,
        max_tokens: int = 150,
        temperature: float = 0.9,
    ) -> None:
        """Initialize model settings and the HTTP client."""

        self.model = model
        self.client = client if client is not None else OpenAIChatClient(api_key=api_key)
        self.prompts = PromptLibrary()
        self._chooser = chooser if chooser is not None else random.Random()
        self._events = event_logger if event_logger is not None else ChatEventLogger()
        self.max_tokens = max_tokens
        self.temperature = temperature

    def welcome(self, scenario: str, locale: str) -> str:
        """Return the static scenario welcome message."""

        return self.prompts.welcome_message(scenario)

    def reply(self, message: str, scenario: str, locale: str) -> str:
        """Ask the model for a reply; use a canned scenario reply on provider failure."""

        try:
            return self.client.chat_completion_text(
                model=self.model,
                system_prompt=self.prompts.system_prompt(scenario, locale),
                user_prompt=message,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIProviderError as exc:
            self._events.log_reply_fallback(scenario, exc.failure_kind)
            return self._chooser.choice(self.prompts.fallback_responses(scenario))


class OfflineChatResponder:
    """Deterministic responder that cycles through canned scenario replies."""

    provider_id = "offline"

    def __init__(self) -> None:
        self.prompts = PromptLibrary()
        self._turns: dict[str, int] = {}

    def welcome(self, scenario: str, locale: str) -> str:
        """Return the static scenario welcome message."""

        return self.prompts.welcome_message(scenario)

    def reply(self, message: str, scenario: str, locale: str) -> str:
        """Return the next canned reply for the scenario."""

        responses = self.prompts.fallback_responses(scenario)
        turn = self._turns.get(scenario, 0)
        self._turns[scenario] = turn + 1
        return responses[turn % len(responses)]
