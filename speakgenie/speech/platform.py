"""Speech platform interfaces and the `pyttsx3`-backed implementation.

Responsibilities:
- Define the protocol the controller and catalog use to reach a synthesis
  platform: voice enumeration, voice-change notification, and asynchronous
  utterance playback with start/end/error callbacks.
- Adapt the operating system's offline voices (via `pyttsx3`) to that protocol.

The platform never blocks inside `speak`; callbacks are delivered later from
the platform's event loop (`run_until_idle` for `pyttsx3`).
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

import pyttsx3

from ..errors import SpeechPlatformError
from ..models.datatypes import PlatformUtterance, Voice
from ..parsing import normalize_locale_tag


class UtteranceListener(Protocol):
    """Callbacks a platform delivers for one queued utterance."""

    def on_start(self) -> None:
        """Called when audio output for the utterance begins."""

    def on_end(self) -> None:
        """Called when the utterance finished playing."""

    def on_error(self, error: str) -> None:
        """Called when the platform could not play the utterance."""


class VoiceSource(Protocol):
    """Read side of a platform used by the voice catalog."""

    def list_voices(self) -> Sequence[Voice]:
        """Return the voices the platform currently reports."""

    def on_voices_changed(self, listener: Callable[[], None]) -> None:
        """Register a listener fired whenever the voice list changes."""


class SpeechPlatform(VoiceSource, Protocol):
    """Full synthesis platform used by the speech controller."""

    def speak(self, utterance: PlatformUtterance, listener: UtteranceListener) -> None:
        """Queue one utterance; raise `SpeechPlatformError` if it cannot be queued."""

    def cancel(self) -> None:
        """Cancel the current utterance and drop anything queued."""

    def pause(self) -> None:
        """Pause audio output; raise `SpeechPlatformError` if unsupported."""

    def resume(self) -> None:
        """Resume paused audio output; raise `SpeechPlatformError` if unsupported."""

    def run_until_idle(self) -> None:
        """Deliver pending callbacks until every queued utterance has settled."""


class Pyttsx3Platform:
    """Offline system voices (SAPI5, NSSpeechSynthesizer, eSpeak) via `pyttsx3`.

    Utterance callbacks fire from inside `run_until_idle`, on the calling
    thread. `pyttsx3` has no pause primitive and no pitch control, so `pause`
    and `resume` raise `SpeechPlatformError` and the utterance pitch is ignored.
    """

    def __init__(self, engine: Any | None = None) -> None:
        self._engine = engine if engine is not None else pyttsx3.init()
        self._listeners: dict[str, UtteranceListener] = {}
        self._voice_listeners: list[Callable[[], None]] = []
        self._base_rate = float(self._engine.getProperty("rate") or 200)
        self._default_voice_id = self._engine.getProperty("voice")
        self._engine.connect("started-utterance", self._on_started)
        self._engine.connect("finished-utterance", self._on_finished)
        self._engine.connect("error", self._on_error)

    def list_voices(self) -> tuple[Voice, ...]:
        """Return normalized voices reported by the engine."""

        raw_voices = self._engine.getProperty("voices") or []
        return tuple(self._to_voice(raw_voice) for raw_voice in raw_voices)

    def on_voices_changed(self, listener: Callable[[], None]) -> None:
        """Register a voice-change listener."""

        self._voice_listeners.append(listener)

    def notify_voices_changed(self) -> None:
        """Fire voice-change listeners, e.g. after a voice pack was installed."""

        for listener in list(self._voice_listeners):
            listener()

    def speak(self, utterance: PlatformUtterance, listener: UtteranceListener) -> None:
        """Queue voice, rate, volume, and text commands for one utterance."""

        voice_id = (
            utterance.voice.voice_id if utterance.voice is not None else self._default_voice_id
        )
        if utterance.voice is not None and not self._has_voice(voice_id):
            # Property command errors carry the previous utterance name.
            raise SpeechPlatformError(f"pyttsx3 has no voice `{voice_id}`")
        self._listeners[utterance.utterance_id] = listener
        try:
            if voice_id:
                self._engine.setProperty("voice", voice_id)
            self._engine.setProperty("rate", max(1, round(self._base_rate * utterance.rate)))
            self._engine.setProperty("volume", utterance.volume)
            self._engine.say(utterance.text, utterance.utterance_id)
        except (RuntimeError, ValueError, KeyError, OSError) as exc:
            self._listeners.pop(utterance.utterance_id, None)
            raise SpeechPlatformError(f"pyttsx3 rejected utterance: {exc}") from exc

    def cancel(self) -> None:
        """Stop the engine and forget listeners of queued utterances."""

        self._listeners.clear()
        self._engine.stop()

    def pause(self) -> None:
        """Refuse; `pyttsx3` cannot pause mid-utterance."""

        raise SpeechPlatformError("pyttsx3 cannot pause speech")

    def resume(self) -> None:
        """Refuse; see `pause`."""

        raise SpeechPlatformError("pyttsx3 cannot resume speech")

    def run_until_idle(self) -> None:
        """Run the engine loop until every queued utterance has settled."""

        self._engine.runAndWait()

    def _on_started(self, name: str) -> None:
        listener = self._listeners.get(name)
        if listener is not None:
            listener.on_start()

    def _on_finished(self, name: str, completed: bool = True) -> None:
        # `completed` is False for interrupted utterances; those are settled too.
        listener = self._listeners.pop(name, None)
        if listener is not None:
            listener.on_end()

    def _on_error(self, name: str, exception: BaseException | None = None) -> None:
        listener = self._listeners.pop(name, None)
        if listener is None:
            return
        if exception is None:
            listener.on_error("synthesis-failed")
        else:
            listener.on_error(str(exception) or type(exception).__name__)

    def _has_voice(self, voice_id: str) -> bool:
        raw_voices = self._engine.getProperty("voices") or []
        return any(str(raw_voice.id) == voice_id for raw_voice in raw_voices)

    def _to_voice(self, raw_voice: Any) -> Voice:
        languages = getattr(raw_voice, "languages", None) or []
        locale = normalize_locale_tag(languages[0]) if languages else ""
        voice_id = str(raw_voice.id)
        return Voice(
            voice_id=voice_id,
            name=str(getattr(raw_voice, "name", None) or voice_id),
            locale=locale,
            default=voice_id == self._default_voice_id,
        )
