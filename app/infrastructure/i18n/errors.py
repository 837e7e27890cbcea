"""Errors and diagnostics for the i18n system.

Exceptions are raised only where a caller cannot recover locally (bad
configuration, an unwritable catalog, a held lock). Everything a request or
an analyzer run is expected to survive is reported as a Diagnostic instead:
logged at the point of origin and, when the caller passes a
DiagnosticCollector, collected for inspection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import structlog

logger = structlog.get_logger().bind(component="i18n.diagnostics")


class I18nError(Exception):
    """Base exception for all i18n errors."""

    pass


class UnsupportedLanguageError(I18nError, ValueError):
    """Raised when a language code is not a member of the registry.

    Example:
        >>> registry.require("de")
        Traceback (most recent call last):
        ...
        UnsupportedLanguageError: Unsupported language: de
    """

    def __init__(self, code: Any, supported: Optional[Iterable[str]] = None):
        self.code = code
        self.supported = list(supported or [])
        super().__init__(f"Unsupported language: {code}")


class SchemaError(I18nError):
    """Raised when localized field schemas are inconsistent."""

    pass


class CatalogParseError(I18nError):
    """Raised when a catalog resource cannot be parsed.

    Attributes:
        language: Language whose catalog failed.
        path: Resource path.
        reason: Parser message.
    """

    def __init__(self, language: str, path: Any, reason: str):
        self.language = language
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to parse catalog {self.path} ({language}): {reason}")


class CatalogWriteError(I18nError):
    """Raised when a catalog resource cannot be written back."""

    def __init__(self, language: str, path: Any, reason: str):
        self.language = language
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to write catalog {self.path} ({language}): {reason}")


class CatalogLockError(I18nError):
    """Raised when another run holds the catalog lock."""

    pass


class DiagnosticKind(str, Enum):
    """Recoverable conditions reported by the i18n system."""

    UNSUPPORTED_LANGUAGE = "unsupported_language"
    MISSING_TRANSLATION = "missing_translation"
    AMBIGUOUS_LOCALIZED_FIELD = "ambiguous_localized_field"
    CATALOG_PARSE_ERROR = "catalog_parse_error"
    UNEXTRACTABLE_KEY_REFERENCE = "unextractable_key_reference"


@dataclass(frozen=True)
class Diagnostic:
    """One recoverable condition.

    Attributes:
        kind: Condition kind.
        message: Human-friendly description.
        context: Structured details (language, field, file, ...).
    """

    kind: DiagnosticKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, **self.context}


class DiagnosticCollector:
    """Collects diagnostics reported during one operation.

    Usage:
        diagnostics = DiagnosticCollector()
        resolve_localized(value, "ar", "fr", diagnostics=diagnostics)
        if diagnostics.of_kind(DiagnosticKind.MISSING_TRANSLATION):
            ...
    """

    def __init__(self):
        self.items: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def report(
    kind: DiagnosticKind,
    message: str,
    diagnostics: Optional[DiagnosticCollector] = None,
    **context: Any,
) -> Diagnostic:
    """Log a diagnostic and hand it to the collector, if any.

    Args:
        kind: Condition kind; also used as the log event name.
        message: Human-friendly description.
        diagnostics: Optional collector.
        **context: Structured details.

    Returns:
        The Diagnostic.
    """
    diagnostic = Diagnostic(kind=kind, message=message, context=context)
    logger.warning(kind.value, message=message, **context)
    if diagnostics is not None:
        diagnostics.add(diagnostic)
    return diagnostic
