"""Static catalog of supported conversation languages.

The catalog is loaded at import time and never mutated. A language's locale is
only a lookup key into the voice catalog; a device may have no voice for it.
"""

from __future__ import annotations

from ..models.datatypes import LanguageConfig


SUPPORTED_LANGUAGES: tuple[LanguageConfig, ...] = (
    LanguageConfig(
        id="en",
        name="English",
        native_name="English",
        locale="en-US",
        description="Practice English conversations",
        flag="🇺🇸",
    ),
    LanguageConfig(
        id="hi",
        name="Hindi",
        native_name="हिंदी",
        locale="hi-IN",
        description="हिंदी में बातचीत का अभ्यास करें",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="mr",
        name="Marathi",
        native_name="मराठी",
        locale="mr-IN",
        description="मराठीत संवाद सराव करा",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="gu",
        name="Gujarati",
        native_name="ગુજરાતી",
        locale="gu-IN",
        description="ગુજરાતીમાં વાતચીતનો અભ્યાસ કરો",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="ta",
        name="Tamil",
        native_name="தமிழ்",
        locale="ta-IN",
        description="தமிழில் உரையாடல் பயிற்சி செய்யுங்கள்",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="te",
        name="Telugu",
        native_name="తెలుగు",
        locale="te-IN",
        description="తెలుగులో సంభాషణ అభ్యాసం చేయండి",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="kn",
        name="Kannada",
        native_name="ಕನ್ನಡ",
        locale="kn-IN",
        description="ಕನ್ನಡದಲ್ಲಿ ಸಂಭಾಷಣೆ ಅಭ್ಯಾಸ ಮಾಡಿ",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="ml",
        name="Malayalam",
        native_name="മലയാളം",
        locale="ml-IN",
        description="മലയാളത്തിൽ സംവാദം പരിശീലിക്കുക",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="bn",
        name="Bengali",
        native_name="বাংলা",
        locale="bn-IN",
        description="বাংলায় কথোপকথন অনুশীলন করুন",
        flag="🇮🇳",
    ),
    LanguageConfig(
        id="pa",
        name="Punjabi",
        native_name="ਪੰਜਾਬੀ",
        locale="pa-IN",
        description="ਪੰਜਾਬੀ ਵਿੱਚ ਗੱਲਬਾਤ ਦਾ ਅਭਿਆਸ ਕਰੋ",
        flag="🇮🇳",
    ),
)


def get_language_by_id(language_id: str) -> LanguageConfig | None:
    """Return the catalog entry with the given short id, if any."""

    return next((language for language in SUPPORTED_LANGUAGES if language.id == language_id), None)


def get_language_by_locale(locale: str) -> LanguageConfig | None:
    """Return the catalog entry with the given locale tag, if any."""

    return next((language for language in SUPPORTED_LANGUAGES if language.locale == locale), None)


def get_default_language() -> LanguageConfig:
    """Return the default (English) catalog entry."""

    return SUPPORTED_LANGUAGES[0]
