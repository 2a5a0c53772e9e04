"""Chat session service used by the conversation surface.

Responsibilities:
- Create practice sessions seeded with the scenario welcome message.
- Store user messages, obtain tutor replies, and store them in order.
"""

from __future__ import annotations

from ..catalog.scenarios import is_known_scenario
from ..errors import SessionNotFoundError
from ..models.datatypes import ChatExchange, ChatMessage, ChatSession
from ..parsing import normalize_optional_string
from ..telemetry.logger import ChatEventLogger
from .responder import ChatResponder
from .storage import ChatStore


class ChatService:
    """Session lifecycle and message exchange on top of a store and responder."""

    def __init__(
        self,
        responder: ChatResponder,
        store: ChatStore | None = None,
        event_logger: ChatEventLogger | None = None,
    ) -> None:
        self.responder = responder
        self.store = store if store is not None else ChatStore()
        self._events = event_logger if event_logger is not None else ChatEventLogger()

    def create_session(self, scenario: str, locale: str) -> ChatSession:
        """Create a session and store the tutor's welcome message.

        Raises:
            ValueError: If the scenario id is not in the catalog.
        """

        if not is_known_scenario(scenario):
            raise ValueError(f"Unknown scenario `{scenario}`.")
        session = self.store.create_session(scenario=scenario, locale=locale)
        self.store.add_message(session.id, "ai", self.responder.welcome(scenario, locale))
        self._events.log_session_created(session.id, scenario, locale)
        return session

    def get_session(self, session_id: str) -> ChatSession:
        """Return a session or raise `SessionNotFoundError`."""

        session = self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def list_sessions(self) -> list[ChatSession]:
        """Return all sessions, newest first."""

        return self.store.list_sessions()

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        """Return a session transcript in timestamp order."""

        return self.store.list_messages(session_id)

    def send_user_message(self, session_id: str, text: str) -> ChatExchange:
        """Store a user message and the tutor's reply to it.

        Raises:
            SessionNotFoundError: If the session does not exist.
            ValueError: If the message is blank.
        """

        session = self.get_session(session_id)
        normalized = normalize_optional_string(text)
        if normalized is None:
            raise ValueError("Message text must not be blank.")

        user_message = self.store.add_message(session.id, "user", normalized)
        reply_text = self.responder.reply(normalized, session.scenario, session.locale)
        ai_message = self.store.add_message(session.id, "ai", reply_text)
        return ChatExchange(user_message=user_message, ai_message=ai_message)
