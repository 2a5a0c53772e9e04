"""Voice resolution policy: ordered match rules and substitute tables.

Responsibilities:
- Hold the static tables that drive voice fallback (regional families, named
  substitutes, the universal fallback language, and the last-resort locale).
- Expand those tables into an ordered tuple of pure `MatchRule` objects.

Adding a language family or a substitute pair is a data change here; the
resolution loop in `voice_catalog` never changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from ..models.datatypes import Voice
from ..parsing import primary_subtag


INDIC_LANGUAGES = frozenset({"hi", "mr", "gu", "ta", "te", "kn", "ml", "bn", "pa"})

_DEFAULT_FAMILIES: Mapping[str, frozenset[str]] = MappingProxyType({"indic": INDIC_LANGUAGES})
_DEFAULT_SUBSTITUTES: Mapping[str, str] = MappingProxyType({"mr-IN": "hi-IN", "gu-IN": "hi-IN"})


@dataclass(frozen=True, slots=True)
class MatchRule:
    """One resolution step: a locale predicate and a voice predicate.

    Attributes:
        name: Rule label reported in diagnostics (`exact`, `primary_subtag`, ...).
        applies: Whether the rule is consulted for a requested locale.
        matches: Whether a voice satisfies the rule for a requested locale.
    """

    name: str
    applies: Callable[[str], bool]
    matches: Callable[[str, Voice], bool]


def _always(_locale: str) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class VoicePolicy:
    """Configurable voice fallback policy.

    Attributes:
        universal_language: Primary subtag tried for any locale before the
            last-resort "first voice" rule.
        last_resort_locale: Locale tag of the final fallback chain candidate.
        regional_families: Family name to set of related primary subtags.
        substitutes: Requested locale to phonetically closer substitute locale.
        substitute_before_family: Consult named substitutes before regional
            families when both apply.
    """

    universal_language: str = "en"
    last_resort_locale: str = "en-US"
    regional_families: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: _DEFAULT_FAMILIES
    )
    substitutes: Mapping[str, str] = field(default_factory=lambda: _DEFAULT_SUBSTITUTES)
    substitute_before_family: bool = False

    def substitute_for(self, locale: str) -> str | None:
        """Return the named substitute locale for a requested locale, if any."""

        return self.substitutes.get(locale)

    def family_of(self, locale: str) -> frozenset[str] | None:
        """Return the regional family containing the locale's primary subtag."""

        language = primary_subtag(locale)
        for members in self.regional_families.values():
            if language in members:
                return members
        return None

    def rules(self) -> tuple[MatchRule, ...]:
        """Return resolution rules in evaluation order."""

        family_rule = MatchRule(
            name="regional_family",
            applies=lambda locale: self.family_of(locale) is not None,
            matches=self._matches_family,
        )
        substitute_rule = MatchRule(
            name="named_substitute",
            applies=lambda locale: self.substitute_for(locale) is not None,
            matches=self._matches_substitute,
        )
        middle = (
            (substitute_rule, family_rule)
            if self.substitute_before_family
            else (family_rule, substitute_rule)
        )
        return (
            MatchRule(
                name="exact",
                applies=_always,
                matches=lambda locale, voice: voice.locale == locale,
            ),
            MatchRule(
                name="primary_subtag",
                applies=_always,
                matches=lambda locale, voice: voice.locale.startswith(primary_subtag(locale)),
            ),
            *middle,
            MatchRule(
                name="universal_language",
                applies=_always,
                matches=lambda _locale, voice: voice.locale.startswith(self.universal_language),
            ),
            MatchRule(name="any_voice", applies=_always, matches=lambda _locale, _voice: True),
        )

    def _matches_family(self, locale: str, voice: Voice) -> bool:
        members = self.family_of(locale) or frozenset()
        return any(voice.locale.startswith(language) for language in members)

    def _matches_substitute(self, locale: str, voice: Voice) -> bool:
        substitute = self.substitute_for(locale)
        if substitute is None:
            return False
        return voice.locale.startswith(primary_subtag(substitute))


DEFAULT_POLICY = VoicePolicy()
