"""Language models for the i18n system.

Defines the language registry and the request-scoped language context.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from infrastructure.i18n.errors import UnsupportedLanguageError


class TextDirection(str, Enum):
    """Writing direction of a language."""

    LTR = "ltr"
    RTL = "rtl"


class PluralCategory(str, Enum):
    """CLDR plural categories, in canonical order.

    Catalog keys realize them as suffixes (e.g. "items_one", "items_other").
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"

    @property
    def suffix(self) -> str:
        """Catalog key suffix for this category (e.g. "_one")."""
        return f"_{self.value}"

    @classmethod
    def ordered(cls, categories: Iterable["PluralCategory"]) -> Tuple["PluralCategory", ...]:
        """Return categories sorted in canonical CLDR order, without duplicates."""
        wanted = set(categories)
        return tuple(c for c in cls if c in wanted)


class SignalSource(str, Enum):
    """Where a negotiated language came from, in priority order."""

    OVERRIDE = "override"
    PREFERENCE = "preference"
    HEADER = "header"
    ACCEPT_LANGUAGE = "accept_language"
    DEFAULT = "default"


@dataclass(frozen=True)
class LanguageDescriptor:
    """Immutable description of one supported language.

    Attributes:
        code: Language code (e.g. "fr", "tz-tfng").
        direction: Text direction.
        plural_categories: Required plural categories, canonical order.
        label: English display name.
        native_label: Display name in the language itself.
    """

    code: str
    direction: TextDirection = TextDirection.LTR
    plural_categories: Tuple[PluralCategory, ...] = (
        PluralCategory.ONE,
        PluralCategory.OTHER,
    )
    label: str = ""
    native_label: str = ""

    @property
    def is_rtl(self) -> bool:
        return self.direction == TextDirection.RTL

    def requires(self, category: PluralCategory) -> bool:
        """Check whether the language requires a plural category."""
        return category in self.plural_categories

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "label": self.label,
            "native_label": self.native_label,
            "direction": self.direction.value,
            "plural_categories": [c.value for c in self.plural_categories],
        }


@dataclass(frozen=True)
class LanguageRegistry:
    """Closed set of supported languages, built once at startup.

    Membership is decided by match(): exact code, alias, or a code left
    after folding regional subtags ("fr-FR" -> "fr", "ar_DZ" -> "ar").

    Attributes:
        languages: Supported language descriptors, in configured order.
        default_code: Code used when nothing else matches.
        aliases: Alternate codes mapped to supported codes.
    """

    languages: Tuple[LanguageDescriptor, ...]
    default_code: str
    aliases: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        codes = [lang.code for lang in self.languages]
        if not codes:
            raise ValueError("LanguageRegistry requires at least one language")
        if len(set(codes)) != len(codes):
            raise ValueError(f"Duplicate language codes: {codes}")
        if self.default_code not in codes:
            raise ValueError(
                f"Default language '{self.default_code}' is not one of {codes}"
            )
        for alias, target in self.aliases.items():
            if target not in codes:
                raise ValueError(
                    f"Alias '{alias}' points at unsupported language '{target}'"
                )
        for lang in self.languages:
            if PluralCategory.OTHER not in lang.plural_categories:
                raise ValueError(
                    f"Language '{lang.code}' must require the 'other' plural category"
                )

    @property
    def codes(self) -> List[str]:
        """Supported codes in configured order."""
        return [lang.code for lang in self.languages]

    @property
    def default(self) -> LanguageDescriptor:
        return self.get(self.default_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and any(lang.code == code for lang in self.languages)

    def get(self, code: str) -> LanguageDescriptor:
        """Get the descriptor for an exact supported code.

        Args:
            code: Supported language code.

        Returns:
            The LanguageDescriptor.

        Raises:
            UnsupportedLanguageError: If the code is not supported.
        """
        for lang in self.languages:
            if lang.code == code:
                return lang
        raise UnsupportedLanguageError(code, self.codes)

    def match(self, raw: Optional[str]) -> Optional[str]:
        """Map a raw language value to a supported code.

        Tries, in order: the exact code, an alias, then the same two checks
        after dropping trailing subtags one at a time.

        Args:
            raw: Raw value from a request signal or user input.

        Returns:
            Supported code, or None when the value is not a member.
        """
        if not raw or not isinstance(raw, str):
            return None

        candidate = raw.strip().lower().replace("_", "-")
        if ";" in candidate:
            candidate = candidate.split(";", 1)[0].strip()

        while candidate:
            if candidate in self:
                return candidate
            if candidate in self.aliases:
                return self.aliases[candidate]
            if "-" not in candidate:
                break
            candidate = candidate.rsplit("-", 1)[0]
        return None

    def require(self, raw: Optional[str]) -> str:
        """Like match(), but raises for non-members.

        Raises:
            UnsupportedLanguageError: If the value is not a member.
        """
        code = self.match(raw)
        if code is None:
            raise UnsupportedLanguageError(raw, self.codes)
        return code

    def direction_of(self, code: str) -> TextDirection:
        return self.get(code).direction

    def is_rtl(self, code: str) -> bool:
        matched = self.match(code)
        return matched is not None and self.get(matched).is_rtl

    def describe(self) -> List[Dict[str, object]]:
        """Public language list (code, labels, direction, plural categories)."""
        return [lang.to_dict() for lang in self.languages]


@dataclass(frozen=True)
class NegotiationSignals:
    """Pre-extracted language signals of one request, all optional.

    Attributes:
        override: Explicit override (e.g. the ?lang= query parameter).
        preference: Persisted preference (e.g. the language cookie).
        header: Custom language header (e.g. X-Language).
        accept_language: Raw Accept-Language header.
    """

    override: Optional[str] = None
    preference: Optional[str] = None
    header: Optional[str] = None
    accept_language: Optional[str] = None


@dataclass(frozen=True)
class RequestLanguageContext:
    """Language negotiated for one request. Read-only, discarded at request end.

    Attributes:
        language: Negotiated supported language code.
        direction: Text direction of the language.
        source: Which signal won (DEFAULT when none matched).
        persisted_preference: Supported code found in the persisted
            preference signal, if any.
    """

    language: str
    direction: TextDirection
    source: SignalSource = SignalSource.DEFAULT
    persisted_preference: Optional[str] = None

    @property
    def is_rtl(self) -> bool:
        return self.direction == TextDirection.RTL

    @property
    def should_persist(self) -> bool:
        """True when the explicit override won and differs from the stored preference."""
        return (
            self.source == SignalSource.OVERRIDE
            and self.language != self.persisted_preference
        )
