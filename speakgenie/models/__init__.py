"""Shared typed data models for SpeakGenie.

This package contains dataclasses used across speech, chat, and CLI modules
to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    ChatExchange,
    ChatMessage,
    ChatSession,
    FallbackCandidate,
    LanguageConfig,
    PlatformUtterance,
    Scenario,
    SpeechFailure,
    SpeechResult,
    SpeechState,
    UtteranceRequest,
    Voice,
)

__all__ = [
    "ChatExchange",
    "ChatMessage",
    "ChatSession",
    "FallbackCandidate",
    "LanguageConfig",
    "PlatformUtterance",
    "Scenario",
    "SpeechFailure",
    "SpeechResult",
    "SpeechState",
    "UtteranceRequest",
    "Voice",
]
