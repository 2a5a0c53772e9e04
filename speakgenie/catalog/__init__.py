"""Static language and scenario catalogs loaded once at startup."""

from .languages import (
    SUPPORTED_LANGUAGES,
    get_default_language,
    get_language_by_id,
    get_language_by_locale,
)
from .scenarios import FREE_CHAT_SCENARIO_ID, SCENARIOS, get_scenario_by_id, is_known_scenario

__all__ = [
    "FREE_CHAT_SCENARIO_ID",
    "SCENARIOS",
    "SUPPORTED_LANGUAGES",
    "get_default_language",
    "get_language_by_id",
    "get_language_by_locale",
    "get_scenario_by_id",
    "is_known_scenario",
]
