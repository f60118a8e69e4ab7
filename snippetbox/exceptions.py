"""
Snippetbox — Exception Hierarchy
==================================

What:  The closed set of application errors raised by the storage model and
       the request handlers.
How:   Each exception carries a user-safe message and an optional context
       dict. The context is logged server-side only, never rendered.
Who:   Raised by SnippetModel and the form validation; translated to HTTP
       statuses by the request handlers.

Exception Hierarchy:
    SnippetboxError (base)
    ├── NoRecordError     → 404 Not Found (unknown or expired snippet)
    ├── StorageError      → 500 Internal Server Error (backend malfunction)
    └── ValidationError   → 400 Bad Request (client can fix the input)

Callers distinguish the kinds with `except NoRecordError:` or `isinstance`,
never by inspecting message text.
"""

from typing import Any, Dict, Mapping, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Description safe to show to a client
        context:  Debug details for the server log (NOT returned to clients)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NoRecordError(SnippetboxError):
    """
    Raised when no active snippet matches the requested identifier.

    Covers both "never existed" and "expired"; the two cases are deliberately
    indistinguishable to callers.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        snippet_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if snippet_id is not None:
            ctx["snippet_id"] = snippet_id
        super().__init__(message="no matching record found", context=ctx)
        self.snippet_id = snippet_id


class StorageError(SnippetboxError):
    """
    Raised when a persistence operation fails for any reason other than
    "no matching record": lost connection, malformed query, constraint
    violation, pool timeout.

    The driver exception is chained as `__cause__` for the server log.
    HTTP:    500 Internal Server Error (generic body, details never exposed)
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(SnippetboxError):
    """
    Raised when client input fails validation, before anything is persisted.

    Attributes:
        field_errors: field name → human-readable problem, used to re-render
                      the form next to the offending inputs.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        field_errors: Optional[Mapping[str, str]] = None,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.field_errors: Dict[str, str] = dict(field_errors or {})
        ctx = context or {}
        if self.field_errors:
            ctx["fields"] = sorted(self.field_errors)
        super().__init__(message=message, context=ctx)
