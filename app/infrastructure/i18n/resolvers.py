"""Language negotiation for inbound requests.

Determines the active language of a request from an ordered set of signals
(explicit override, persisted preference, custom header, Accept-Language),
validated against the LanguageRegistry.
"""

from typing import List, Optional, Tuple

import structlog
from infrastructure.i18n.errors import DiagnosticCollector, DiagnosticKind, report
from infrastructure.i18n.models import (
    LanguageRegistry,
    NegotiationSignals,
    RequestLanguageContext,
    SignalSource,
)

logger = structlog.get_logger().bind(component="i18n.resolver")


def parse_accept_language(header: Optional[str]) -> List[str]:
    """Parse an Accept-Language header into language ranges by preference.

    "fr-FR,fr;q=0.9,en;q=0.8" -> ["fr-FR", "fr", "en"]

    Ranges are ordered by quality, descending; ties keep header order.
    Wildcards and ranges with q=0 are dropped; a malformed quality counts
    as 1.0.

    Args:
        header: Raw header value.

    Returns:
        Language ranges, most preferred first.
    """
    if not header:
        return []

    preferences: List[Tuple[str, float]] = []
    for part in header.split(","):
        lang_range = part.split(";")[0].strip()
        if not lang_range or lang_range == "*":
            continue

        quality = 1.0
        for param in part.split(";")[1:]:
            param = param.strip()
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 1.0

        if quality <= 0:
            continue
        preferences.append((lang_range, quality))

    # sorted() is stable, so equal qualities keep header order
    return [lang for lang, _ in sorted(preferences, key=lambda p: p[1], reverse=True)]


class LanguageNegotiator:
    """Negotiates the language of a request.

    Signals are evaluated in fixed priority order:
    1. Explicit override (query parameter)
    2. Persisted preference (cookie)
    3. Custom header
    4. Accept-Language header
    5. Registry default

    The first signal whose value is a registry member wins. Unsupported
    values are treated as absent. Negotiation performs no I/O and never fails.
    """

    def __init__(self, registry: LanguageRegistry):
        """Initialize the negotiator.

        Args:
            registry: Supported languages.
        """
        self.registry = registry
        self.log = logger.bind(default_language=registry.default_code)

    def negotiate(
        self,
        signals: NegotiationSignals,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> RequestLanguageContext:
        """Determine the language context for a request.

        Args:
            signals: Pre-extracted request signals.
            diagnostics: Optional collector for unsupported signal values.

        Returns:
            RequestLanguageContext for the request.
        """
        override = self._match_signal(signals.override, SignalSource.OVERRIDE, diagnostics)
        if override:
            # the stored preference is only compared, never a candidate here
            return self._context(
                override, SignalSource.OVERRIDE, self.registry.match(signals.preference)
            )

        preference = self._match_signal(
            signals.preference, SignalSource.PREFERENCE, diagnostics
        )
        if preference:
            return self._context(preference, SignalSource.PREFERENCE, preference)

        code = self._match_signal(signals.header, SignalSource.HEADER, diagnostics)
        if code:
            return self._context(code, SignalSource.HEADER, preference)

        code = self.resolve_from_header(signals.accept_language)
        if code:
            return self._context(code, SignalSource.ACCEPT_LANGUAGE, preference)

        return self._context(self.registry.default_code, SignalSource.DEFAULT, preference)

    def resolve_from_header(self, accept_language: Optional[str]) -> Optional[str]:
        """Return the first supported language in an Accept-Language header.

        Args:
            accept_language: Raw header value.

        Returns:
            Supported code, or None when no range matches.
        """
        for lang_range in parse_accept_language(accept_language):
            code = self.registry.match(lang_range)
            if code:
                return code
        return None

    def _match_signal(
        self,
        value: Optional[str],
        source: SignalSource,
        diagnostics: Optional[DiagnosticCollector],
    ) -> Optional[str]:
        if value is None or not str(value).strip():
            return None
        code = self.registry.match(value)
        if code is None:
            report(
                DiagnosticKind.UNSUPPORTED_LANGUAGE,
                f"Ignoring unsupported language '{value}' from {source.value}",
                diagnostics,
                value=str(value)[:32],
                source=source.value,
            )
        return code

    def _context(
        self, code: str, source: SignalSource, preference: Optional[str]
    ) -> RequestLanguageContext:
        context = RequestLanguageContext(
            language=code,
            direction=self.registry.direction_of(code),
            source=source,
            persisted_preference=preference,
        )
        self.log.debug("language_negotiated", language=code, source=source.value)
        return context
