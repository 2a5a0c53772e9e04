"""In-memory speech platform doubles shared by unit and integration tests."""

from __future__ import annotations

from typing import Callable, Iterable

from speakgenie.errors import SpeechPlatformError
from speakgenie.models.datatypes import PlatformUtterance, Voice
from speakgenie.speech.platform import UtteranceListener


def make_voice(voice_id: str, locale: str, *, default: bool = False) -> Voice:
    """Build a voice whose display name is derived from its id."""

    return Voice(voice_id=voice_id, name=voice_id.title(), locale=locale, default=default)


EN_US = make_voice("samantha", "en-US", default=True)
EN_IN = make_voice("rishi", "en-IN")
HI_IN = make_voice("lekha", "hi-IN")
TA_IN = make_voice("vani", "ta-IN")


class FakeSpeechPlatform:
    """Scriptable platform that records utterances and fires callbacks on demand.

    Callbacks never fire from `speak`; tests drive them explicitly with
    `start`, `finish`, and `fail`, or settle everything with `run_until_idle`.
    """

    def __init__(
        self,
        voices: Iterable[Voice] = (),
        *,
        failing_locales: Iterable[str] = (),
        failing_voice_ids: Iterable[str] = (),
        rejected_locales: Iterable[str] = (),
        fail_without_exact_voice: bool = False,
        refuse_pause: bool = False,
    ) -> None:
        self._voices = tuple(voices)
        self.failing_locales = set(failing_locales)
        self.failing_voice_ids = set(failing_voice_ids)
        self.rejected_locales = set(rejected_locales)
        self.fail_without_exact_voice = fail_without_exact_voice
        self.refuse_pause = refuse_pause
        self.calls: list[tuple[PlatformUtterance, UtteranceListener]] = []
        self._pending: list[tuple[PlatformUtterance, UtteranceListener]] = []
        self._voice_listeners: list[Callable[[], None]] = []
        self.cancel_count = 0
        self.pause_count = 0
        self.resume_count = 0

    @property
    def utterances(self) -> list[PlatformUtterance]:
        """Return every utterance accepted by `speak`, in order."""

        return [utterance for utterance, _ in self.calls]

    def list_voices(self) -> tuple[Voice, ...]:
        return self._voices

    def on_voices_changed(self, listener: Callable[[], None]) -> None:
        self._voice_listeners.append(listener)

    def set_voices(self, voices: Iterable[Voice]) -> None:
        """Replace the voice list and notify listeners, like a late platform load."""

        self._voices = tuple(voices)
        for listener in list(self._voice_listeners):
            listener()

    def speak(self, utterance: PlatformUtterance, listener: UtteranceListener) -> None:
        if utterance.locale in self.rejected_locales:
            raise SpeechPlatformError(f"locale {utterance.locale} rejected")
        self.calls.append((utterance, listener))
        self._pending.append((utterance, listener))

    def cancel(self) -> None:
        self.cancel_count += 1
        self._pending.clear()

    def pause(self) -> None:
        if self.refuse_pause:
            raise SpeechPlatformError("pause unsupported")
        self.pause_count += 1

    def resume(self) -> None:
        if self.refuse_pause:
            raise SpeechPlatformError("resume unsupported")
        self.resume_count += 1

    def start(self, index: int = -1) -> None:
        self.calls[index][1].on_start()

    def finish(self, index: int = -1) -> None:
        self.calls[index][1].on_end()

    def fail(self, index: int = -1, error: str = "synthesis-failed") -> None:
        self.calls[index][1].on_error(error)

    def run_until_idle(self) -> None:
        """Play queued utterances in order, including fallbacks queued meanwhile."""

        while self._pending:
            utterance, listener = self._pending.pop(0)
            if self._should_fail(utterance):
                listener.on_error("synthesis-failed")
                continue
            listener.on_start()
            listener.on_end()

    def _should_fail(self, utterance: PlatformUtterance) -> bool:
        if utterance.locale in self.failing_locales:
            return True
        if utterance.voice is not None and utterance.voice.voice_id in self.failing_voice_ids:
            return True
        if self.fail_without_exact_voice:
            return not any(voice.locale == utterance.locale for voice in self._voices)
        return False
