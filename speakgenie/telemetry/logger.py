"""Structured event logging for the speech engine and chat layer.

Responsibilities:
- Emit concise, deterministic `key=value` event lines through `loguru`.
- Keep text payloads and secrets out of log output.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger

from ..models.datatypes import FallbackCandidate, SpeechFailure


def configure_logging(sink: TextIO | None = None, level: str = "INFO") -> None:
    """Route all SpeakGenie log lines to one sink with plain message formatting."""

    logger.remove()
    logger.add(sink or sys.stderr, format="{message}", level=level, colorize=False)


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip() if value is not None else ""
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def _candidate_context(candidate: FallbackCandidate) -> dict[str, object]:
    voice = candidate.voice
    return {
        "tier": candidate.tier,
        "locale": candidate.locale,
        "voice": voice.name if voice is not None else None,
        "voice_locale": voice.locale if voice is not None else None,
    }


class _EventLogger:
    """Shared `[component] level=... event=...` line emitter."""

    component = "event"

    def _emit(self, level: str, event: str, **context: object) -> None:
        line = f"[{self.component}] level={level} event={event}{_format_context(context)}"
        logger.log(level, line)


class SpeechEventLogger(_EventLogger):
    """Emit speech controller and voice catalog events."""

    component = "speech"

    def log_voices_refreshed(self, voice_count: int) -> None:
        """Emit a voice list refresh event."""

        self._emit("DEBUG", "voices_refreshed", count=voice_count)

    def log_attempt(self, request_id: int, attempt: int, candidate: FallbackCandidate) -> None:
        """Emit an event for one fallback chain attempt."""

        self._emit(
            "INFO",
            "attempt",
            request=request_id,
            attempt=attempt,
            **_candidate_context(candidate),
        )

    def log_started(self, request_id: int, candidate: FallbackCandidate) -> None:
        """Emit a platform start confirmation."""

        self._emit("INFO", "started", request=request_id, **_candidate_context(candidate))

    def log_completed(self, request_id: int, candidate: FallbackCandidate, attempts: int) -> None:
        """Emit a request fulfilment event."""

        self._emit(
            "INFO",
            "completed",
            request=request_id,
            attempts=attempts,
            **_candidate_context(candidate),
        )

    def log_attempt_failed(
        self, request_id: int, candidate: FallbackCandidate, error: str
    ) -> None:
        """Emit a recoverable per-attempt failure."""

        self._emit(
            "WARNING",
            "attempt_failed",
            request=request_id,
            error=error,
            **_candidate_context(candidate),
        )

    def log_exhausted(self, failure: SpeechFailure) -> None:
        """Emit the single terminal failure event for a request."""

        self._emit(
            "ERROR",
            "exhausted",
            request=failure.request_id,
            locale=failure.request.locale,
            attempts=len(failure.attempted),
            last_error=failure.errors[-1] if failure.errors else None,
        )

    def log_interrupted(self, request_id: int, reason: str) -> None:
        """Emit an event for a request cancelled before it settled."""

        self._emit("INFO", "interrupted", request=request_id, reason=reason)

    def log_control_refused(self, action: str, error: str) -> None:
        """Emit a pause or resume request the platform declined."""

        self._emit("WARNING", "control_refused", action=action, error=error)

    def log_stale_callback(self, callback: str, token: int) -> None:
        """Emit a debug event for an ignored callback from a superseded attempt."""

        self._emit("DEBUG", "stale_callback", callback=callback, token=token)


class ChatEventLogger(_EventLogger):
    """Emit chat session and responder events."""

    component = "chat"

    def log_session_created(self, session_id: str, scenario: str, locale: str) -> None:
        """Emit a session creation event."""

        self._emit("INFO", "session_created", session=session_id, scenario=scenario, locale=locale)

    def log_reply_fallback(self, scenario: str, failure_kind: str) -> None:
        """Emit an event when the provider failed and a canned reply was used."""

        self._emit("WARNING", "reply_fallback", scenario=scenario, failure_kind=failure_kind)
