"""HTTP integration for request language negotiation.

Provides the Starlette middleware that negotiates the language of every
request, and the FastAPI dependencies route handlers use to read it.

Usage:
    from fastapi import FastAPI
    from infrastructure.i18n.http import LanguageMiddleware, LanguageContextDep

    app = FastAPI()
    app.add_middleware(LanguageMiddleware)

    @app.get("/hello")
    def hello(language: LanguageContextDep):
        return {"language": language.language, "rtl": language.is_rtl}
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from infrastructure.configuration import LocalizationSettings
from infrastructure.i18n.models import (
    LanguageRegistry,
    NegotiationSignals,
    RequestLanguageContext,
)
from infrastructure.i18n.service import LocalizationService
from infrastructure.logging import bind_request_context
from infrastructure.services.providers import (
    get_language_registry,
    get_localization_service,
    get_settings,
)

logger = structlog.get_logger().bind(component="i18n.http")

CONTENT_LANGUAGE_HEADER = "Content-Language"
X_CONTENT_LANGUAGE_HEADER = "X-Content-Language"
REQUEST_ID_HEADER = "X-Request-ID"


def extract_signals(request: Request, settings: LocalizationSettings) -> NegotiationSignals:
    """Read the raw language signals of a request.

    Args:
        request: Incoming request.
        settings: Names of the query parameter, cookie and header.

    Returns:
        NegotiationSignals, unvalidated.
    """
    return NegotiationSignals(
        override=request.query_params.get(settings.query_param),
        preference=request.cookies.get(settings.cookie_name),
        header=request.headers.get(settings.header_name),
        accept_language=request.headers.get("accept-language"),
    )


class LanguageMiddleware(BaseHTTPMiddleware):
    """Negotiates the language of each request.

    Stores the RequestLanguageContext on request.state.language_context,
    binds the language to the request's log context, sets the
    Content-Language and X-Content-Language response headers, and writes
    the preference cookie when an explicit override changed the language.
    """

    def __init__(
        self,
        app,
        service: Optional[LocalizationService] = None,
        settings: Optional[LocalizationSettings] = None,
    ):
        super().__init__(app)
        self.service = service or get_localization_service()
        self.settings = settings or get_settings().localization

    async def dispatch(self, request, call_next):
        context = self.service.negotiate(extract_signals(request, self.settings))
        request.state.language_context = context

        with bind_request_context(
            correlation_id=request.headers.get(REQUEST_ID_HEADER),
            language=context.language,
            request_path=request.url.path,
            request_method=request.method,
        ):
            response = await call_next(request)

        response.headers[CONTENT_LANGUAGE_HEADER] = context.language
        response.headers[X_CONTENT_LANGUAGE_HEADER] = context.language
        if context.should_persist:
            response.set_cookie(
                key=self.settings.cookie_name,
                value=context.language,
                max_age=self.settings.cookie_max_age_seconds,
                httponly=True,
                samesite="lax",
            )
            logger.debug("language_preference_persisted", language=context.language)
        return response


def get_language_context(request: Request) -> RequestLanguageContext:
    """FastAPI dependency returning the negotiated language context.

    Raises:
        RuntimeError: If LanguageMiddleware is not installed.
    """
    context = getattr(request.state, "language_context", None)
    if context is None:
        raise RuntimeError("LanguageMiddleware is not installed")
    return context


def get_target_language(
    lang: str,
    registry: Annotated[LanguageRegistry, Depends(get_language_registry)],
) -> str:
    """FastAPI dependency validating a ``lang`` path or query parameter.

    Returns:
        The supported code the value maps to.

    Raises:
        HTTPException: 400 when the language is not supported.
    """
    code = registry.match(lang)
    if code is None:
        raise HTTPException(
            status_code=400,
            detail={
                "error": f"Unsupported language: {lang}",
                "supported_languages": registry.codes,
            },
        )
    return code


LanguageContextDep = Annotated[RequestLanguageContext, Depends(get_language_context)]
TargetLanguageDep = Annotated[str, Depends(get_target_language)]
