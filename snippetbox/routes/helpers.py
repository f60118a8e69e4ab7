"""
Snippetbox — Error Response Helpers
=====================================

What:  The three ways a handler ends a request unsuccessfully.
How:   Plain-text responses carrying only the standard status phrase. Server
       errors are logged with the request line and traceback; the client sees
       the same generic body whatever the cause.
"""

import logging
from http import HTTPStatus

from fastapi import Request
from fastapi.responses import PlainTextResponse


def request_uri(request: Request) -> str:
    """Path plus query string, as it appeared on the request line."""
    uri = request.url.path
    if request.url.query:
        uri = f"{uri}?{request.url.query}"
    return uri


def client_error(status_code: int) -> PlainTextResponse:
    """Respond with the status phrase only, e.g. '400 Bad Request' → 'Bad Request'."""
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


def not_found() -> PlainTextResponse:
    return client_error(404)


def server_error(
    logger: logging.Logger, request: Request, exc: BaseException
) -> PlainTextResponse:
    """
    Log an unexpected failure and send a generic 500.

    Logged: error message, HTTP method, request URI and full traceback.
    Never sent to the client: any of the above.
    """
    context = getattr(exc, "context", {})
    logger.error(
        "%s | method=%s uri=%s context=%s",
        exc,
        request.method,
        request_uri(request),
        context,
        exc_info=exc,
    )
    return PlainTextResponse(
        HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
    )
