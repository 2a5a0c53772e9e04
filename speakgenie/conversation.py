"""Voice conversation loop joining the chat service and the speech controller.

A recognized transcript goes to the chat service; the stored tutor reply is
spoken in the session locale. Speech outcomes are reported through the
controller's listeners and never affect the stored transcript.
"""

from __future__ import annotations

from .chat.session import ChatService
from .models.datatypes import (
    DEFAULT_PITCH,
    DEFAULT_RATE,
    DEFAULT_VOLUME,
    ChatExchange,
    ChatMessage,
    ChatSession,
)
from .parsing import normalize_optional_string
from .speech.controller import SpeechController


class VoiceConversation:
    """One practice session with spoken tutor replies."""

    def __init__(
        self,
        chat: ChatService,
        speech: SpeechController,
        session: ChatSession,
        *,
        rate: float = DEFAULT_RATE,
        pitch: float = DEFAULT_PITCH,
        volume: float = DEFAULT_VOLUME,
        muted: bool = False,
    ) -> None:
        self.chat = chat
        self.speech = speech
        self.session = session
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.muted = muted

    @classmethod
    def start(
        cls,
        chat: ChatService,
        speech: SpeechController,
        scenario: str,
        locale: str,
        *,
        rate: float = DEFAULT_RATE,
        pitch: float = DEFAULT_PITCH,
        volume: float = DEFAULT_VOLUME,
        muted: bool = False,
    ) -> VoiceConversation:
        """Create a session and speak its welcome message."""

        session = chat.create_session(scenario, locale)
        conversation = cls(
            chat, speech, session, rate=rate, pitch=pitch, volume=volume, muted=muted
        )
        messages = chat.list_messages(session.id)
        if messages:
            conversation.speak_message(messages[-1])
        return conversation

    @property
    def transcript(self) -> list[ChatMessage]:
        """Return the session transcript."""

        return self.chat.list_messages(self.session.id)

    def handle_transcript(self, transcript: str) -> ChatExchange | None:
        """Send a final recognition transcript and speak the reply; ignore blanks."""

        if normalize_optional_string(transcript) is None:
            return None
        exchange = self.chat.send_user_message(self.session.id, transcript)
        self.speak_message(exchange.ai_message)
        return exchange

    def speak_message(self, message: ChatMessage) -> int | None:
        """Speak one stored message in the session locale unless muted."""

        if self.muted:
            return None
        return self.speech.speak(
            message.text,
            self.session.locale,
            rate=self.rate,
            pitch=self.pitch,
            volume=self.volume,
        )

    def toggle_mute(self) -> bool:
        """Flip mute; muting stops any reply being spoken. Returns the new state."""

        self.muted = not self.muted
        if self.muted:
            self.speech.stop()
        return self.muted
