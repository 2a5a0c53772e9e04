"""Logging helpers for speech and chat events."""

from .logger import ChatEventLogger, SpeechEventLogger, configure_logging

__all__ = ["ChatEventLogger", "SpeechEventLogger", "configure_logging"]
