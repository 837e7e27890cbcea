"""Resolution and merging of localized values.

A localized value is a plain mapping of language code to string, e.g.
{"fr": "Bonjour", "en": "Hello"}. Resolution picks the best string for a
target language; merging applies a per-language patch without losing the
languages the patch does not mention.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
from infrastructure.i18n.errors import (
    DiagnosticCollector,
    DiagnosticKind,
    UnsupportedLanguageError,
    report,
)
from infrastructure.i18n.models import LanguageRegistry

logger = structlog.get_logger().bind(component="i18n.localized")

LocalizedValue = Dict[str, str]


@dataclass(frozen=True)
class TranslationStatus:
    """Translation coverage of one localized value.

    Attributes:
        percentage: Share of supported languages translated, rounded.
        complete: Languages with a non-blank entry.
        missing: Languages without one.
    """

    percentage: int
    complete: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "complete": list(self.complete),
            "missing": list(self.missing),
        }


def _entry(value: Mapping[str, Any], lang: Optional[str]) -> Optional[str]:
    if lang is None:
        return None
    entry = value.get(lang)
    return entry if isinstance(entry, str) else None


def resolve_localized(
    value: Union[Mapping[str, Any], str, None],
    lang: str,
    default_lang: str,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> str:
    """Return the best string of a localized value for a language.

    Fallback chain:
    1. The entry for ``lang``
    2. The entry for ``default_lang``
    3. The first non-empty entry, in insertion order
    4. "" (a missing_translation diagnostic is reported)

    A bare string is returned unchanged. The input is never mutated.

    Args:
        value: Localized value, already-resolved string, or None.
        lang: Target language code.
        default_lang: Registry default language code.
        diagnostics: Optional collector.

    Returns:
        The resolved string.

    Example:
        >>> resolve_localized({"fr": "Bonjour", "en": "Hello"}, "ar", "fr")
        'Bonjour'
    """
    if isinstance(value, str):
        return value

    if isinstance(value, Mapping):
        for code in (lang, default_lang):
            entry = _entry(value, code)
            if entry is not None:
                return entry

        for entry in value.values():
            if isinstance(entry, str) and entry:
                return entry

    report(
        DiagnosticKind.MISSING_TRANSLATION,
        "No translation available",
        diagnostics,
        language=lang,
        default_language=default_lang,
    )
    return ""


def is_localized_value(value: Any, registry: LanguageRegistry) -> bool:
    """Check whether a value has the shape of a localized value.

    A localized value is a mapping whose keys are all supported codes and
    whose values are strings or None. An empty mapping qualifies.
    """
    if not isinstance(value, Mapping):
        return False
    return all(
        code in registry and (entry is None or isinstance(entry, str))
        for code, entry in value.items()
    )


def has_translation(value: Any, lang: str) -> bool:
    """Check whether a localized value has a non-blank entry for a language."""
    if not isinstance(value, Mapping):
        return False
    entry = value.get(lang)
    return isinstance(entry, str) and entry.strip() != ""


def translation_status(value: Any, registry: LanguageRegistry) -> TranslationStatus:
    """Report which supported languages a localized value covers.

    Args:
        value: Localized value.
        registry: Supported languages.

    Returns:
        TranslationStatus with the coverage percentage.
    """
    complete = [code for code in registry.codes if has_translation(value, code)]
    missing = [code for code in registry.codes if code not in complete]
    percentage = round(len(complete) / len(registry.codes) * 100)
    return TranslationStatus(percentage=percentage, complete=complete, missing=missing)


def merge_localized(
    existing: Union[Mapping[str, Any], str, None],
    patch: Union[Mapping[str, Any], str, None],
    active_lang: str,
    *,
    registry: Optional[LanguageRegistry] = None,
    default_lang: Optional[str] = None,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> LocalizedValue:
    """Apply a language patch to a localized value.

    Entries of a mapping patch overwrite the same languages of a copy of
    ``existing``; a None entry clears that language. A bare string patch is
    the entry for ``active_lang``. A None patch returns a copy. Languages
    absent from the patch are kept. ``existing`` is never mutated.

    When a registry is given, patch entries for unsupported languages are
    dropped and reported rather than stored.

    Args:
        existing: Current localized value. A legacy plain string is lifted
            to an entry for the default language.
        patch: Mapping of language to string, bare string, or None.
        active_lang: Language of a bare string patch.
        registry: Optional registry used to validate codes.
        default_lang: Language of a legacy plain string ``existing``;
            defaults to the registry default, then ``active_lang``.
        diagnostics: Optional collector.

    Returns:
        A new localized value.

    Raises:
        UnsupportedLanguageError: If a registry is given and ``active_lang``
            is not one of its languages.
    """
    if registry is not None and active_lang not in registry:
        raise UnsupportedLanguageError(active_lang, registry.codes)

    if isinstance(existing, str):
        lift_to = default_lang or (registry.default_code if registry else active_lang)
        merged: LocalizedValue = {lift_to: existing}
    elif isinstance(existing, Mapping):
        merged = dict(existing)
    else:
        merged = {}

    if patch is None:
        return merged

    if isinstance(patch, str):
        merged[active_lang] = patch
        return merged

    for code, entry in patch.items():
        if registry is not None and code not in registry:
            report(
                DiagnosticKind.UNSUPPORTED_LANGUAGE,
                f"Dropping patch entry for unsupported language '{code}'",
                diagnostics,
                value=str(code)[:32],
                source="patch",
            )
            continue
        if entry is None:
            merged.pop(code, None)
        else:
            merged[code] = entry

    return merged
