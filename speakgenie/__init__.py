"""Top-level package for SpeakGenie.

This package provides a voice tutor for children: practice conversations in
Indian languages and English with spoken replies. The speech engine entry
points are `VoiceCatalog` and `SpeechController`.
"""

from .speech.controller import SpeechController
from .speech.voice_catalog import VoiceCatalog

__all__ = ["SpeechController", "VoiceCatalog", "__version__"]

__version__ = "0.1.0"
