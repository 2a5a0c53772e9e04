"""Chat session layer: storage, tutor responders, and the session service."""

from .openai_client import OpenAIChatClient, OpenAIProviderError
from .prompts import PromptLibrary
from .rate_limiter import RateLimiter
from .responder import ChatResponder, OfflineChatResponder, OpenAIChatResponder
from .session import ChatService
from .storage import ChatStore

__all__ = [
    "ChatResponder",
    "ChatService",
    "ChatStore",
    "OfflineChatResponder",
    "OpenAIChatClient",
    "OpenAIChatResponder",
    "OpenAIProviderError",
    "PromptLibrary",
    "RateLimiter",
]
