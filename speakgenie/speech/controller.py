"""Speech controller: one active utterance with a bounded fallback chain.

Responsibilities:
- Turn `speak` requests into platform utterances using the voice catalog.
- Retry failed attempts through a per-request fallback queue of alternate
  voices and locales, then settle in `IDLE` with exactly one outcome.
- Ignore callbacks from cancelled or superseded attempts.

State machine::

    IDLE --speak--> SPEAKING --pause--> PAUSED --resume--> SPEAKING
    SPEAKING --end--> IDLE
    SPEAKING --error--> SPEAKING (next candidate) | IDLE (chain exhausted)
    any --stop--> IDLE

Every attempt is issued with a fresh integer token. Platform callbacks carry
the token of the attempt they belong to; callbacks whose token is not current
are dropped, which keeps late events from a cancelled utterance away from the
next one without relying on timing.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from ..errors import SpeechPlatformError
from ..models.datatypes import (
    DEFAULT_PITCH,
    DEFAULT_RATE,
    DEFAULT_VOLUME,
    FallbackCandidate,
    PlatformUtterance,
    SpeechFailure,
    SpeechResult,
    SpeechState,
    UtteranceRequest,
    Voice,
)
from ..parsing import normalize_optional_string, primary_subtag
from ..telemetry.logger import SpeechEventLogger
from .platform import SpeechPlatform
from .voice_catalog import VoiceCatalog, VoiceMatch


@dataclass(slots=True)
class _ActiveRequest:
    """Mutable bookkeeping for the request currently owned by the controller."""

    request_id: int
    request: UtteranceRequest
    pending: deque[FallbackCandidate]
    attempted: list[FallbackCandidate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class _AttemptListener:
    """Platform listener bound to the token of a single attempt."""

    __slots__ = ("_controller", "_token")

    def __init__(self, controller: SpeechController, token: int) -> None:
        self._controller = controller
        self._token = token

    def on_start(self) -> None:
        self._controller._handle_start(self._token)

    def on_end(self) -> None:
        self._controller._handle_end(self._token)

    def on_error(self, error: str) -> None:
        self._controller._handle_error(self._token, error)


class SpeechController:
    """Own at most one active utterance and drive its fallback chain."""

    def __init__(
        self,
        platform: SpeechPlatform,
        catalog: VoiceCatalog,
        *,
        event_logger: SpeechEventLogger | None = None,
        on_complete: Callable[[SpeechResult], None] | None = None,
        on_failure: Callable[[SpeechFailure], None] | None = None,
        on_state_change: Callable[[SpeechState], None] | None = None,
        preferred_voice_id: str | None = None,
    ) -> None:
        """Initialize an idle controller bound to a platform and voice catalog.

        Args:
            preferred_voice_id: Voice pinned by the user; used as the primary
                voice whenever its locale equals the requested locale.
        """

        self._platform = platform
        self._catalog = catalog
        self._events = event_logger if event_logger is not None else SpeechEventLogger()
        self._on_complete = on_complete
        self._on_failure = on_failure
        self._on_state_change = on_state_change
        self._state = SpeechState.IDLE
        self._active: _ActiveRequest | None = None
        self._token = 0
        self._request_seq = 0
        self.last_result: SpeechResult | SpeechFailure | None = None
        self._preferred_voice_id = normalize_optional_string(preferred_voice_id)

    @property
    def state(self) -> SpeechState:
        """Return the current lifecycle state."""

        return self._state

    @property
    def is_speaking(self) -> bool:
        """Return whether an utterance is active (speaking or paused)."""

        return self._state is not SpeechState.IDLE

    @property
    def is_paused(self) -> bool:
        """Return whether the active utterance is paused."""

        return self._state is SpeechState.PAUSED

    @property
    def voices(self) -> tuple[Voice, ...]:
        """Return the catalog's current voices for diagnostics display."""

        return self._catalog.voices

    @property
    def preferred_voice_id(self) -> str | None:
        """Return the pinned voice id, if any."""

        return self._preferred_voice_id

    def set_voice(self, voice_id: str | None) -> None:
        """Pin a voice for requests in its own locale; `None` clears the pin.

        The pin applies from the next `speak` call. Unknown ids are kept and
        take effect once the platform reports a voice with that id.
        """

        self._preferred_voice_id = normalize_optional_string(voice_id)

    @property
    def current_candidate(self) -> FallbackCandidate | None:
        """Return the candidate of the attempt in flight, if any."""

        if self._active is None or not self._active.attempted:
            return None
        return self._active.attempted[-1]

    def speak(
        self,
        text: str,
        locale: str,
        rate: float = DEFAULT_RATE,
        pitch: float = DEFAULT_PITCH,
        volume: float = DEFAULT_VOLUME,
    ) -> int | None:
        """Speak text in a locale, replacing any active utterance.

        Returns:
            The request id, or `None` when `text` is blank and nothing happened.
        """

        if not text or not text.strip():
            return None

        self._cancel_active("superseded")
        locale_tag = normalize_optional_string(locale) or self._catalog.policy.last_resort_locale
        request = UtteranceRequest(
            text=text, locale=locale_tag, rate=rate, pitch=pitch, volume=volume
        )
        self._request_seq += 1
        request_id = self._request_seq
        self._active = _ActiveRequest(
            request_id=request_id,
            request=request,
            pending=deque(self.build_fallback_chain(locale_tag)),
        )
        self._attempt_next()
        return request_id

    def build_fallback_chain(self, locale: str) -> tuple[FallbackCandidate, ...]:
        """Build the ordered candidates tried for one request in `locale`.

        The chain holds the pinned voice when it speaks `locale` exactly, or
        else the catalog's best voice for the requested locale; then the named
        substitute (only when the primary voice is not a native match and a
        substitute voice exists); then the universal last-resort locale.
        Repeated `(voice, locale)` pairs are dropped.
        """

        policy = self._catalog.policy
        primary_match = self.resolve_primary(locale)
        primary_voice = primary_match.voice if primary_match is not None else None
        candidates = [FallbackCandidate(voice=primary_voice, locale=locale, tier="primary")]

        substitute = policy.substitute_for(locale)
        if substitute is not None and (primary_voice is None or primary_voice.locale != locale):
            substitute_voice = self._catalog.find_by_prefix(primary_subtag(substitute))
            if substitute_voice is not None:
                candidates.append(
                    FallbackCandidate(voice=substitute_voice, locale=substitute, tier="substitute")
                )

        voices = self._catalog.voices
        last_resort_voice = self._catalog.find_by_prefix(policy.universal_language) or (
            voices[0] if voices else None
        )
        candidates.append(
            FallbackCandidate(
                voice=last_resort_voice,
                locale=policy.last_resort_locale,
                tier="last_resort",
            )
        )

        chain: list[FallbackCandidate] = []
        seen: set[tuple[str | None, str]] = set()
        for candidate in candidates:
            if candidate.identity in seen:
                continue
            seen.add(candidate.identity)
            chain.append(candidate)
        return tuple(chain)

    def resolve_primary(self, locale: str) -> VoiceMatch | None:
        """Return the primary voice for `locale`: the pinned voice or the catalog's best."""

        if self._preferred_voice_id is not None:
            pinned = self._catalog.find_by_id(self._preferred_voice_id)
            if pinned is not None and pinned.locale == locale:
                return VoiceMatch(voice=pinned, rule="pinned")
        return self._catalog.resolve_match(locale)

    def pause(self) -> bool:
        """Pause the active utterance; ignored unless speaking.

        Returns:
            Whether the controller is now paused. A platform that cannot pause
            refuses with `SpeechPlatformError` and the state stays `SPEAKING`.
        """

        if self._state is not SpeechState.SPEAKING:
            return self._state is SpeechState.PAUSED
        try:
            self._platform.pause()
        except SpeechPlatformError as exc:
            self._events.log_control_refused("pause", str(exc))
            return False
        self._set_state(SpeechState.PAUSED)
        return True

    def resume(self) -> bool:
        """Resume a paused utterance; ignored unless paused.

        Returns:
            Whether the controller is now speaking.
        """

        if self._state is not SpeechState.PAUSED:
            return self._state is SpeechState.SPEAKING
        try:
            self._platform.resume()
        except SpeechPlatformError as exc:
            self._events.log_control_refused("resume", str(exc))
            return False
        self._set_state(SpeechState.SPEAKING)
        return True

    def stop(self) -> None:
        """Cancel any active utterance and pending fallbacks, ending idle."""

        if not self._cancel_active("stopped"):
            self._platform.cancel()
        self._set_state(SpeechState.IDLE)

    def _cancel_active(self, reason: str) -> bool:
        """Invalidate the active request and ask the platform to cancel it."""

        active = self._active
        if active is None:
            return False
        self._active = None
        self._token += 1
        self._events.log_interrupted(active.request_id, reason)
        self._platform.cancel()
        return True

    def _attempt_next(self) -> None:
        """Issue the next pending candidate, or settle as failed when none remain."""

        active = self._active
        while active is not None and active.pending:
            candidate = active.pending.popleft()
            active.attempted.append(candidate)
            attempt = len(active.attempted)
            self._token += 1
            token = self._token
            utterance = PlatformUtterance(
                utterance_id=f"speakgenie-{active.request_id}-{attempt}",
                text=active.request.text,
                locale=candidate.locale,
                voice=candidate.voice,
                rate=active.request.rate,
                pitch=active.request.pitch,
                volume=active.request.volume,
            )
            self._events.log_attempt(active.request_id, attempt, candidate)
            self._set_state(SpeechState.SPEAKING)
            if self._active is not active or token != self._token:
                # A state listener stopped or replaced this request.
                return
            try:
                self._platform.speak(utterance, _AttemptListener(self, token))
            except SpeechPlatformError as exc:
                if token != self._token:
                    return
                active.errors.append(str(exc))
                self._events.log_attempt_failed(active.request_id, candidate, str(exc))
                continue
            return

        if active is not None and self._active is active:
            self._exhaust(active)

    def _handle_start(self, token: int) -> None:
        if self._is_stale(token, "start"):
            return
        if self._state is not SpeechState.PAUSED:
            self._set_state(SpeechState.SPEAKING)
        active = self._active
        self._events.log_started(active.request_id, active.attempted[-1])

    def _handle_end(self, token: int) -> None:
        if self._is_stale(token, "end"):
            return
        active = self._active
        result = SpeechResult(
            request_id=active.request_id,
            request=active.request,
            candidate=active.attempted[-1],
            attempts=len(active.attempted),
        )
        self._settle()
        self._events.log_completed(result.request_id, result.candidate, result.attempts)
        self.last_result = result
        if self._on_complete is not None:
            self._on_complete(result)

    def _handle_error(self, token: int, error: str) -> None:
        if self._is_stale(token, "error"):
            return
        active = self._active
        active.errors.append(error)
        self._events.log_attempt_failed(active.request_id, active.attempted[-1], error)
        self._attempt_next()

    def _exhaust(self, active: _ActiveRequest) -> None:
        failure = SpeechFailure(
            request_id=active.request_id,
            request=active.request,
            attempted=tuple(active.attempted),
            errors=tuple(active.errors),
        )
        self._settle()
        self._events.log_exhausted(failure)
        self.last_result = failure
        if self._on_failure is not None:
            self._on_failure(failure)

    def _settle(self) -> None:
        self._active = None
        self._token += 1
        self._set_state(SpeechState.IDLE)

    def _is_stale(self, token: int, callback: str) -> bool:
        if self._active is not None and token == self._token:
            return False
        self._events.log_stale_callback(callback, token)
        return True

    def _set_state(self, state: SpeechState) -> None:
        if state is self._state:
            return
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
