"""Prompt and canned-message library for the tutor.

Responsibilities:
- Centralize per-scenario system prompts and the reply-language instruction.
- Provide scenario welcome messages and offline fallback replies.
"""

from __future__ import annotations

from ..catalog.languages import get_language_by_locale
from ..catalog.scenarios import FREE_CHAT_SCENARIO_ID

_AUDIENCE = "Use simple language appropriate for ages 6-16."

SCENARIO_PROMPTS: dict[str, str] = {
    FREE_CHAT_SCENARIO_ID: (
        "You are SpeakGenie, a friendly AI voice tutor for children aged 6-16. You help them "
        "practice conversations in a fun, encouraging way. Be supportive, use simple language, "
        "and add appropriate emojis. Keep responses concise and engaging. Always ask follow-up "
        "questions to keep the conversation flowing."
    ),
    "school": (
        "You are SpeakGenie helping a student practice school conversations. You might be a "
        "teacher, classmate, or school staff member. Focus on classroom discussions, "
        "presentations, asking questions, and school-related topics. Be encouraging and "
        f"educational. {_AUDIENCE}"
    ),
    "store": (
        "You are SpeakGenie helping a student practice shopping conversations. You are a store "
        "clerk or cashier. Help them practice asking about products, prices, making purchases, "
        f"and customer service interactions. Be friendly and patient. {_AUDIENCE}"
    ),
    "restaurant": (
        "You are SpeakGenie helping a student practice restaurant conversations. You are a "
        "waiter/waitress or restaurant staff. Help them practice ordering food, asking about "
        "menu items, making special requests, and dining etiquette. Be welcoming and helpful. "
        f"{_AUDIENCE}"
    ),
    "airport": (
        "You are SpeakGenie helping a student practice airport and travel conversations. You "
        "might be airport staff, security, or airline personnel. Help them practice checking "
        "in, asking for directions, going through security, and travel-related questions. Be "
        f"professional but friendly. {_AUDIENCE}"
    ),
    "home": (
        "You are SpeakGenie helping a student practice home and family conversations. You might "
        "be a family member or friend visiting. Focus on daily routines, household topics, "
        f"family activities, and casual conversations. Be warm and familiar. {_AUDIENCE}"
    ),
}

WELCOME_MESSAGES: dict[str, str] = {
    FREE_CHAT_SCENARIO_ID: (
        "Hi there! I'm SpeakGenie, your AI voice tutor! 🧞‍♂️ I'm here to help you practice "
        "speaking. What would you like to talk about today?"
    ),
    "school": (
        "Welcome to school practice! 🎓 I'm here to help you practice classroom conversations. "
        "Are you ready for today's lesson?"
    ),
    "store": (
        "Welcome to our store! 🛍️ I'm here to help you practice shopping conversations. What "
        "are you looking for today?"
    ),
    "restaurant": (
        "Welcome to our restaurant! 🍽️ I'm your server and I'm here to help you practice "
        "ordering. What looks good on our menu?"
    ),
    "airport": (
        "Welcome to the airport! ✈️ I'm here to help you practice travel conversations. Where "
        "are you flying to today?"
    ),
    "home": (
        "Welcome home! 🏠 I'm here to help you practice family conversations. How was your day "
        "today?"
    ),
}

FALLBACK_RESPONSES: dict[str, tuple[str, ...]] = {
    FREE_CHAT_SCENARIO_ID: (
        "That's interesting! Tell me more about that! 😊",
        "I'd love to hear your thoughts on that! What do you think? 🤔",
        "Great question! What would you like to talk about next? ✨",
    ),
    "school": (
        "That's a great question for class! What subject do you enjoy most? 📚",
        "School can be exciting! What's your favorite part of the school day? 🎒",
        "Learning is fun! What new thing would you like to discover today? 🌟",
    ),
    "store": (
        "Welcome to our store! How can I help you find what you're looking for today? 🛍️",
        "That's a popular item! Would you like to know more about it? 💫",
        "Is there anything else I can help you with today? 😊",
    ),
    "restaurant": (
        "Welcome! What would you like to order today? Our specials are delicious! 🍽️",
        "Great choice! Would you like anything to drink with that? 🥤",
        "How is everything tasting? Can I get you anything else? 😊",
    ),
    "airport": (
        "Welcome to the airport! Do you need help finding your gate? ✈️",
        "Have a safe flight! Is there anything else I can help you with? 🧳",
        "The departure board is over there. What destination are you traveling to? 🌍",
    ),
    "home": (
        "How was your day today? Tell me about the best part! 🏠",
        "That sounds fun! What would you like to do next? 😊",
        "Family time is special! What's your favorite activity to do together? ❤️",
    ),
}


class PromptLibrary:
    """Build prompt strings and canned messages for a scenario and locale."""

    def system_prompt(self, scenario: str, locale: str) -> str:
        """Return the scenario system prompt with a reply-language instruction."""

        base = SCENARIO_PROMPTS.get(scenario, SCENARIO_PROMPTS[FREE_CHAT_SCENARIO_ID])
        return f"{base} {self.language_instruction(locale)}"

    def language_instruction(self, locale: str) -> str:
        """Return the instruction pinning replies to the session language."""

        language = get_language_by_locale(locale)
        if language is None:
            return f"Always reply in the language with locale tag {locale}."
        if language.native_name == language.name:
            return f"Always reply in {language.name}."
        return f"Always reply in {language.name} ({language.native_name}), in its native script."

    def welcome_message(self, scenario: str) -> str:
        """Return the opening tutor message for a scenario."""

        return WELCOME_MESSAGES.get(scenario, WELCOME_MESSAGES[FREE_CHAT_SCENARIO_ID])

    def fallback_responses(self, scenario: str) -> tuple[str, ...]:
        """Return canned replies used when the provider is unavailable."""

        return FALLBACK_RESPONSES.get(scenario, FALLBACK_RESPONSES[FREE_CHAT_SCENARIO_ID])
