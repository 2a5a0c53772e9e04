"""In-memory keyed store for chat sessions and messages.

Responsibilities:
- Create sessions and append messages with generated ids and timestamps.
- Return transcripts in timestamp order and sessions newest first.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from ..errors import SessionNotFoundError
from ..models.datatypes import ChatMessage, ChatSession, Sender


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatStore:
    """Dictionary-backed session and message store."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        """Initialize empty storage with injectable clock and id generator."""

        self._clock = clock
        self._id_factory = id_factory
        self._sessions: dict[str, ChatSession] = {}
        self._messages: dict[str, list[ChatMessage]] = {}

    def create_session(self, scenario: str, locale: str) -> ChatSession:
        """Create and store a new session."""

        session = ChatSession(
            id=self._id_factory(),
            scenario=scenario,
            locale=locale,
            created_at=self._clock(),
        )
        self._sessions[session.id] = session
        self._messages[session.id] = []
        return session

    def get_session(self, session_id: str) -> ChatSession | None:
        """Return a stored session or `None`."""

        return self._sessions.get(session_id)

    def list_sessions(self) -> list[ChatSession]:
        """Return all sessions, newest first."""

        return sorted(self._sessions.values(), key=lambda session: session.created_at, reverse=True)

    def add_message(self, session_id: str, sender: Sender, text: str) -> ChatMessage:
        """Append a message to a session transcript.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """

        if session_id not in self._sessions:
            raise SessionNotFoundError(session_id)
        message = ChatMessage(
            id=self._id_factory(),
            session_id=session_id,
            sender=sender,
            text=text,
            timestamp=self._clock(),
        )
        self._messages[session_id].append(message)
        return message

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        """Return a session transcript ordered by timestamp.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """

        if session_id not in self._messages:
            raise SessionNotFoundError(session_id)
        # sorted() is stable, so equal timestamps keep insertion order.
        return sorted(self._messages[session_id], key=lambda message: message.timestamp)
