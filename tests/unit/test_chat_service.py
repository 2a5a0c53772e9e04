"""Unit tests for chat storage, responders, and the session service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
import random

import pytest

from speakgenie.chat.openai_client import OpenAIProviderError
from speakgenie.chat.prompts import FALLBACK_RESPONSES, WELCOME_MESSAGES, PromptLibrary
from speakgenie.chat.responder import OfflineChatResponder, OpenAIChatResponder
from speakgenie.chat.session import ChatService
from speakgenie.chat.storage import ChatStore
from speakgenie.errors import SessionNotFoundError


class _StepClock:
    """Clock advancing one second per call."""

    def __init__(self) -> None:
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class _FailingChatClient:
    """Chat client double that always raises a provider error."""

    def chat_completion_text(self, **kwargs: object) -> str:
        raise OpenAIProviderError("quota", failure_kind="insufficient_quota", status_code=429)


class _EchoChatClient:
    """Chat client double that records prompts and echoes the user message."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def chat_completion_text(self, **kwargs: object) -> str:
        self.calls.append(kwargs)
        return f"echo: {kwargs['user_prompt']}"


def _store() -> ChatStore:
    ids = count(1)
    return ChatStore(clock=_StepClock(), id_factory=lambda: f"id-{next(ids)}")


def test_create_session_stores_welcome_message() -> None:
    """A new session starts with the scenario welcome as an AI message."""

    service = ChatService(OfflineChatResponder(), store=_store())

    session = service.create_session("store", "hi-IN")
    messages = service.list_messages(session.id)

    assert session.scenario == "store"
    assert session.locale == "hi-IN"
    assert [(m.sender, m.text) for m in messages] == [("ai", WELCOME_MESSAGES["store"])]


def test_create_session_rejects_unknown_scenario() -> None:
    """Unknown scenario ids are rejected."""

    service = ChatService(OfflineChatResponder(), store=_store())

    with pytest.raises(ValueError, match="library"):
        service.create_session("library", "en-US")


def test_send_user_message_stores_exchange_in_order() -> None:
    """User message and reply are stored in order and returned together."""

    service = ChatService(OfflineChatResponder(), store=_store())
    session = service.create_session("restaurant", "en-US")

    exchange = service.send_user_message(session.id, "  I would like a dosa  ")

    assert exchange.user_message.text == "I would like a dosa"
    assert exchange.ai_message.text == FALLBACK_RESPONSES["restaurant"][0]
    assert [m.sender for m in service.list_messages(session.id)] == ["ai", "user", "ai"]


def test_send_user_message_rejects_blank_and_unknown_session() -> None:
    """Blank text and missing sessions are reported as errors."""

    service = ChatService(OfflineChatResponder(), store=_store())
    session = service.create_session("home", "en-US")

    with pytest.raises(ValueError):
        service.send_user_message(session.id, "   ")
    with pytest.raises(SessionNotFoundError) as exc_info:
        service.send_user_message("missing", "hello")
    assert exc_info.value.session_id == "missing"


def test_store_orders_sessions_newest_first_and_messages_by_time() -> None:
    """Sessions list newest first; transcripts list oldest first."""

    store = _store()
    first = store.create_session("school", "en-US")
    second = store.create_session("home", "hi-IN")
    store.add_message(first.id, "user", "one")
    store.add_message(first.id, "ai", "two")

    assert [s.id for s in store.list_sessions()] == [second.id, first.id]
    assert [m.text for m in store.list_messages(first.id)] == ["one", "two"]
    assert store.get_session("missing") is None
    with pytest.raises(SessionNotFoundError):
        store.add_message("missing", "user", "hello")


def test_store_keeps_insertion_order_for_equal_timestamps() -> None:
    """Messages sharing a timestamp keep their insertion order."""

    fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store = ChatStore(clock=lambda: fixed)
    session = store.create_session("school", "en-US")
    for text in ("a", "b", "c"):
        store.add_message(session.id, "user", text)

    assert [m.text for m in store.list_messages(session.id)] == ["a", "b", "c"]


def test_offline_responder_cycles_canned_replies() -> None:
    """Offline replies rotate through the scenario's canned responses."""

    responder = OfflineChatResponder()
    replies = [responder.reply("hi", "airport", "en-US") for _ in range(4)]

    assert replies == [*FALLBACK_RESPONSES["airport"], FALLBACK_RESPONSES["airport"][0]]


def test_openai_responder_sends_scenario_prompt_with_language_instruction() -> None:
    """The system prompt carries the scenario role and the reply language."""

    client = _EchoChatClient()
    responder = OpenAIChatResponder(model="gpt-4.1-mini", client=client)  # type: ignore[arg-type]

    reply = responder.reply("Namaskar", "school", "mr-IN")

    assert reply == "echo: Namaskar"
    system_prompt = str(client.calls[0]["system_prompt"])
    assert "school conversations" in system_prompt
    assert "Marathi (मराठी)" in system_prompt
    assert client.calls[0]["model"] == "gpt-4.1-mini"
    assert client.calls[0]["max_tokens"] == 150


def test_openai_responder_falls_back_to_canned_reply_on_provider_error() -> None:
    """Provider failures never reach the caller; a canned scenario reply is used."""

    responder = OpenAIChatResponder(
        client=_FailingChatClient(),  # type: ignore[arg-type]
        chooser=random.Random(7),
    )

    reply = responder.reply("hello", "home", "en-US")

    assert reply in FALLBACK_RESPONSES["home"]


def test_prompt_library_defaults_to_free_chat_for_unknown_scenarios() -> None:
    """Unknown scenario ids use the free-chat prompt and messages."""

    prompts = PromptLibrary()

    assert prompts.welcome_message("unknown") == WELCOME_MESSAGES["free-chat"]
    assert prompts.fallback_responses("unknown") == FALLBACK_RESPONSES["free-chat"]
    assert prompts.language_instruction("en-US") == "Always reply in English."
    assert "fr-FR" in prompts.language_instruction("fr-FR")
