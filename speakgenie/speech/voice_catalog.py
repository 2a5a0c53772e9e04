"""Voice discovery cache and best-voice resolution.

Responsibilities:
- Own the process-wide voice list: load it at construction, replace it wholesale
  whenever the platform reports a change, and expose it read-only in between.
- Resolve a requested locale to a single best voice with a deterministic,
  rule-ordered policy.

Key types:
- `VoiceMatch`: resolved voice plus the name of the rule that produced it.
- `VoiceCatalog`: cached voices bound to one platform.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..models.datatypes import Voice
from ..telemetry.logger import SpeechEventLogger
from .platform import VoiceSource
from .policy import DEFAULT_POLICY, VoicePolicy


@dataclass(frozen=True, slots=True)
class VoiceMatch:
    """A resolved voice and the rule that selected it."""

    voice: Voice
    rule: str


def resolve_voice(
    locale: str, voices: Sequence[Voice], policy: VoicePolicy = DEFAULT_POLICY
) -> VoiceMatch | None:
    """Resolve a locale against a voice list; `None` only when `voices` is empty.

    Rules are evaluated in policy order and the first voice, in platform order,
    satisfying the first applicable rule wins.
    """

    if not voices:
        return None
    for rule in policy.rules():
        if not rule.applies(locale):
            continue
        voice = next((candidate for candidate in voices if rule.matches(locale, candidate)), None)
        if voice is not None:
            return VoiceMatch(voice=voice, rule=rule.name)
    return None


class VoiceCatalog:
    """Cached platform voices with locale resolution."""

    def __init__(
        self,
        source: VoiceSource,
        policy: VoicePolicy | None = None,
        event_logger: SpeechEventLogger | None = None,
    ) -> None:
        """Bind to a voice source, load its voices, and subscribe to changes."""

        self._source = source
        self.policy = policy if policy is not None else DEFAULT_POLICY
        self._events = event_logger if event_logger is not None else SpeechEventLogger()
        self._voices: tuple[Voice, ...] = ()
        self.refresh()
        source.on_voices_changed(self.refresh)

    @property
    def voices(self) -> tuple[Voice, ...]:
        """Return the currently cached voices."""

        return self._voices

    def refresh(self) -> tuple[Voice, ...]:
        """Replace the cache with the platform's current voice list."""

        self._voices = tuple(self._source.list_voices())
        self._events.log_voices_refreshed(len(self._voices))
        return self._voices

    def resolve(self, locale: str) -> Voice | None:
        """Return the best cached voice for a locale, or `None` with no voices."""

        match = self.resolve_match(locale)
        return match.voice if match is not None else None

    def resolve_match(self, locale: str) -> VoiceMatch | None:
        """Return the best cached voice for a locale with the matching rule name."""

        return resolve_voice(locale, self._voices, self.policy)

    def find_by_prefix(self, prefix: str) -> Voice | None:
        """Return the first cached voice whose locale starts with `prefix`."""

        return next((voice for voice in self._voices if voice.locale.startswith(prefix)), None)

    def find_by_id(self, voice_id: str) -> Voice | None:
        """Return the cached voice with `voice_id`, if the platform reports it."""

        return next((voice for voice in self._voices if voice.voice_id == voice_id), None)
