"""Domain exceptions for speech, chat, and CLI diagnostics."""

from __future__ import annotations


class CommandStageError(RuntimeError):
    """Raised when a CLI command fails at a specific stage."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SpeechPlatformError(RuntimeError):
    """Raised by a speech platform when an utterance cannot be queued."""


class SessionNotFoundError(LookupError):
    """Raised when a chat session identifier is unknown."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Chat session `{session_id}` not found.")
        self.session_id = session_id
