"""Speech-synthesis voice selection and fallback engine.

This package contains the platform protocol, the `pyttsx3` platform adapter,
the voice resolution policy and catalog, and the speech controller state
machine.
"""

from .controller import SpeechController
from .platform import Pyttsx3Platform, SpeechPlatform, UtteranceListener, VoiceSource
from .policy import DEFAULT_POLICY, MatchRule, VoicePolicy
from .voice_catalog import VoiceCatalog, VoiceMatch, resolve_voice

__all__ = [
    "DEFAULT_POLICY",
    "MatchRule",
    "Pyttsx3Platform",
    "SpeechController",
    "SpeechPlatform",
    "UtteranceListener",
    "VoiceCatalog",
    "VoiceMatch",
    "VoicePolicy",
    "VoiceSource",
    "resolve_voice",
]
