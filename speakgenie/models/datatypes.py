"""Core datatypes shared across SpeakGenie modules.

Responsibilities:
- Represent immutable records exchanged between the speech engine, the chat
  layer, and the CLI.
- Keep platform-specific objects out of controller and catalog logic.

Key types:
- `Voice`, `LanguageConfig`, `Scenario`, `UtteranceRequest`,
  `FallbackCandidate`, `PlatformUtterance`, `SpeechResult`, `SpeechFailure`,
  `ChatSession`, `ChatMessage`, and `ChatExchange`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal

from ..parsing import clamp

RATE_RANGE = (0.1, 10.0)
PITCH_RANGE = (0.0, 2.0)
VOLUME_RANGE = (0.0, 1.0)

DEFAULT_RATE = 1.0
DEFAULT_PITCH = 1.1
DEFAULT_VOLUME = 1.0


@dataclass(frozen=True, slots=True)
class Voice:
    """One synthesis voice reported by the speech platform.

    Attributes:
        voice_id: Platform-native voice identifier.
        name: Human-readable voice name.
        locale: Normalized locale tag such as `hi-IN`; empty when unknown.
        default: Whether the platform marks this voice as its default.
    """

    voice_id: str
    name: str
    locale: str
    default: bool = False


@dataclass(frozen=True, slots=True)
class LanguageConfig:
    """Static catalog entry for one supported conversation language.

    Attributes:
        id: Short language code used on the command line (`hi`).
        name: English display name.
        native_name: Name in the language's own script.
        locale: Locale tag used for both recognition and synthesis.
        description: One-line practice prompt in the native language.
        flag: Flag emoji shown next to the language.
    """

    id: str
    name: str
    native_name: str
    locale: str
    description: str
    flag: str = ""


@dataclass(frozen=True, slots=True)
class Scenario:
    """Conversation practice scenario offered in the scenario picker."""

    id: str
    name: str
    description: str
    examples: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class UtteranceRequest:
    """Text and prosody settings for one `speak` call.

    Numeric settings are clamped on construction: rate to `[0.1, 10]`, pitch
    to `[0, 2]`, and volume to `[0, 1]`.
    """

    text: str
    locale: str
    rate: float = DEFAULT_RATE
    pitch: float = DEFAULT_PITCH
    volume: float = DEFAULT_VOLUME

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", clamp(self.rate, *RATE_RANGE))
        object.__setattr__(self, "pitch", clamp(self.pitch, *PITCH_RANGE))
        object.__setattr__(self, "volume", clamp(self.volume, *VOLUME_RANGE))


@dataclass(frozen=True, slots=True)
class FallbackCandidate:
    """One `(voice, locale)` pair in a per-request fallback chain.

    Attributes:
        voice: Voice to request, or `None` for the platform default voice.
        locale: Locale tag set on the utterance.
        tier: Chain tier label (`primary`, `substitute`, or `last_resort`).
    """

    voice: Voice | None
    locale: str
    tier: str

    @property
    def identity(self) -> tuple[str | None, str]:
        """Return the `(voice id, locale)` pair used to skip duplicate attempts."""

        return (self.voice.voice_id if self.voice is not None else None, self.locale)


@dataclass(frozen=True, slots=True)
class PlatformUtterance:
    """Fully resolved utterance handed to a speech platform."""

    utterance_id: str
    text: str
    locale: str
    voice: Voice | None
    rate: float
    pitch: float
    volume: float


class SpeechState(str, Enum):
    """Lifecycle states of the speech controller."""

    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class SpeechResult:
    """Outcome of a fulfilled `speak` request."""

    request_id: int
    request: UtteranceRequest
    candidate: FallbackCandidate
    attempts: int


@dataclass(frozen=True, slots=True)
class SpeechFailure:
    """Terminal failure of a `speak` request after the chain was exhausted.

    Attributes:
        request_id: Controller-assigned request sequence number.
        request: Original clamped request.
        attempted: Candidates tried, in order.
        errors: Platform error strings, aligned with `attempted`.
    """

    request_id: int
    request: UtteranceRequest
    attempted: tuple[FallbackCandidate, ...]
    errors: tuple[str, ...]


Sender = Literal["user", "ai"]


@dataclass(frozen=True, slots=True)
class ChatSession:
    """One practice conversation."""

    id: str
    scenario: str
    locale: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One message in a practice conversation transcript."""

    id: str
    session_id: str
    sender: Sender
    text: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ChatExchange:
    """A stored user message together with the tutor's stored reply."""

    user_message: ChatMessage
    ai_message: ChatMessage
