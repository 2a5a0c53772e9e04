"""Unit tests for voice caching and locale resolution."""

from __future__ import annotations

import pytest

from speakgenie.speech.policy import VoicePolicy
from speakgenie.speech.voice_catalog import VoiceCatalog, resolve_voice
from tests.speech_fakes import EN_IN, EN_US, HI_IN, TA_IN, FakeSpeechPlatform, make_voice


@pytest.mark.parametrize("locale", ["en-US", "hi-IN", "ta-IN", "en-IN"])
def test_resolve_prefers_exact_locale_tag(locale: str) -> None:
    """A voice with the exact requested tag should win over earlier prefix matches."""

    voices = (EN_US, EN_IN, HI_IN, TA_IN)

    match = resolve_voice(locale, voices)

    assert match is not None
    assert match.voice.locale == locale
    assert match.rule == "exact"


def test_exact_match_is_case_sensitive() -> None:
    """Tag equality is case-sensitive, so a lowercase region falls to the subtag rule."""

    match = resolve_voice("hi-in", (EN_US, HI_IN))

    assert match is not None
    assert match.voice == HI_IN
    assert match.rule == "primary_subtag"


def test_resolve_falls_back_to_primary_subtag() -> None:
    """Without an exact tag, any voice sharing the primary subtag is chosen."""

    match = resolve_voice("en-GB", (HI_IN, EN_IN, EN_US))

    assert match is not None
    assert match.voice == EN_IN
    assert match.rule == "primary_subtag"


def test_regional_family_voice_is_used_for_uncovered_indic_locale() -> None:
    """An Indic locale with no own voice should get another Indic voice before English."""

    match = resolve_voice("kn-IN", (EN_US, TA_IN, HI_IN))

    assert match is not None
    assert match.voice == TA_IN
    assert match.rule == "regional_family"


def test_named_substitute_applies_when_family_rule_is_not_configured() -> None:
    """Marathi resolves to a Hindi voice through its named substitute pair."""

    policy = VoicePolicy(regional_families={})

    match = resolve_voice("mr-IN", (EN_US, TA_IN, HI_IN), policy)

    assert match is not None
    assert match.voice == HI_IN
    assert match.rule == "named_substitute"


def test_substitute_before_family_changes_rule_precedence() -> None:
    """With substitutes first, Gujarati gets Hindi even when Tamil is listed earlier."""

    voices = (EN_US, TA_IN, HI_IN)

    default_match = resolve_voice("gu-IN", voices)
    reordered = resolve_voice("gu-IN", voices, VoicePolicy(substitute_before_family=True))

    assert default_match is not None and default_match.voice == TA_IN
    assert reordered is not None
    assert reordered.voice == HI_IN
    assert reordered.rule == "named_substitute"


def test_non_family_locale_uses_universal_language() -> None:
    """A locale outside every family falls back to an English voice."""

    match = resolve_voice("fr-FR", (HI_IN, EN_IN, EN_US))

    assert match is not None
    assert match.voice == EN_IN
    assert match.rule == "universal_language"


def test_last_resort_is_first_cached_voice() -> None:
    """With no related or universal voice, the first cached voice is returned."""

    voices = (make_voice("kyoko", "ja-JP"), make_voice("yuna", "ko-KR"))

    match = resolve_voice("fr-FR", voices)

    assert match is not None
    assert match.voice.voice_id == "kyoko"
    assert match.rule == "any_voice"


def test_resolve_returns_none_only_for_empty_cache() -> None:
    """An empty voice list is the only case without a resolved voice."""

    assert resolve_voice("hi-IN", ()) is None
    assert resolve_voice("", ()) is None
    assert resolve_voice("", (EN_US,)) is not None


def test_resolution_is_deterministic_for_same_inputs() -> None:
    """Repeated resolution over the same cache yields the same voice."""

    voices = (EN_US, TA_IN, HI_IN, EN_IN)

    results = {resolve_voice("mr-IN", voices) for _ in range(5)}

    assert len(results) == 1


def test_catalog_loads_voices_at_construction_and_refreshes_on_change() -> None:
    """The catalog should replace its cache wholesale when the platform reports changes."""

    platform = FakeSpeechPlatform()
    catalog = VoiceCatalog(platform)

    assert catalog.voices == ()
    assert catalog.resolve("hi-IN") is None

    platform.set_voices([EN_US, HI_IN])
    assert catalog.voices == (EN_US, HI_IN)
    assert catalog.resolve("hi-IN") == HI_IN

    platform.set_voices([TA_IN])
    assert catalog.voices == (TA_IN,)
    assert catalog.resolve("hi-IN") == TA_IN


def test_refresh_is_idempotent() -> None:
    """Redundant refresh calls keep the same cache and never raise."""

    platform = FakeSpeechPlatform([EN_US, HI_IN])
    catalog = VoiceCatalog(platform)

    first = catalog.refresh()
    second = catalog.refresh()

    assert first == second == (EN_US, HI_IN)


def test_find_by_prefix_returns_first_voice_in_platform_order() -> None:
    """Prefix lookup scans voices in platform order."""

    catalog = VoiceCatalog(FakeSpeechPlatform([HI_IN, EN_IN, EN_US]))

    assert catalog.find_by_prefix("en") == EN_IN
    assert catalog.find_by_prefix("mr") is None
