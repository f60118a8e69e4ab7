"""
Snippetbox — Snippet Request Handlers
=======================================

What:  The four snippet pages: home, view, create form, create submit.
How:   Each handler parses/validates its input, makes exactly one call on the
       storage model and branches on the outcome:
           NoRecordError   → 404 Not Found
           StorageError    → 500 Internal Server Error (logged)
           ValidationError → 400 Bad Request (form re-rendered with errors)
       Successful results go to the template renderer.
Who:   Bound to paths by `routes.dispatch.build_router()`.

Handlers are the only place storage errors become HTTP statuses.
"""

from typing import Mapping

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError as SchemaValidationError
from starlette.datastructures import FormData

from snippetbox.application import Application
from snippetbox.exceptions import NoRecordError, StorageError, ValidationError
from snippetbox.routes.helpers import not_found, server_error
from snippetbox.schemas.snippet import FormState, SnippetCreateForm
from snippetbox.templating import TemplateData


def view_path(snippet_id: int) -> str:
    return f"/snippet/view/{snippet_id}"


def _form_value(form: FormData, name: str) -> str:
    # Multipart bodies may carry UploadFile values; only text fields count
    value = form.get(name, "")
    return value if isinstance(value, str) else ""


def validate_create_form(raw: Mapping[str, str]) -> SnippetCreateForm:
    """
    Validate the submitted create form.

    Raises:
        ValidationError: with one message per offending field.
    """
    try:
        return SnippetCreateForm.model_validate(dict(raw))
    except SchemaValidationError as e:
        field_errors = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            cause = err.get("ctx", {}).get("error")
            field_errors.setdefault(field, str(cause) if cause else err["msg"])
        raise ValidationError(field_errors=field_errors) from None


class SnippetHandlers:
    """Request handlers closing over the application context."""

    def __init__(self, app: Application):
        self.app = app

    async def home(self, request: Request) -> Response:
        """GET / — the latest active snippets."""
        try:
            snippets = await self.app.snippets.latest()
        except StorageError as e:
            return server_error(self.app.logger, request, e)

        return self.app.templates.render(
            request, "home.html", TemplateData(snippets=snippets)
        )

    async def snippet_view(self, request: Request, id: int) -> Response:
        """GET /snippet/view/{id} — a single active snippet."""
        if id < 1:
            return not_found()

        try:
            snippet = await self.app.snippets.get(id)
        except NoRecordError:
            return not_found()
        except StorageError as e:
            return server_error(self.app.logger, request, e)

        return self.app.templates.render(
            request, "view.html", TemplateData(snippet=snippet)
        )

    async def snippet_create(self, request: Request) -> Response:
        """GET /snippet/create — the empty form (expiry defaults to one year)."""
        return self.app.templates.render(request, "create.html", TemplateData())

    async def snippet_create_post(self, request: Request) -> Response:
        """
        POST /snippet/create: validate, insert, then 303 to the new snippet.

        A rejected form is never passed to insert(); the page is re-rendered
        with the submitted values and per-field messages, status 400.
        """
        form = await request.form()
        raw = {
            "title": _form_value(form, "title"),
            "content": _form_value(form, "content"),
            "expires": _form_value(form, "expires"),
        }

        try:
            valid = validate_create_form(raw)
        except ValidationError as e:
            state = FormState(**raw, field_errors=e.field_errors)
            return self.app.templates.render(
                request, "create.html", TemplateData(form=state), status_code=400
            )

        try:
            snippet_id = await self.app.snippets.insert(
                valid.title, valid.content, valid.expires
            )
        except StorageError as e:
            return server_error(self.app.logger, request, e)

        # 303 makes the browser follow with GET instead of re-posting the form
        return RedirectResponse(view_path(snippet_id), status_code=303)
