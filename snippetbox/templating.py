"""
Snippetbox — HTML Rendering
=============================

What:  Turns the data a handler produced into an HTML response.
How:   Jinja2 templates (through FastAPI's Jinja2Templates) loaded from the
       packaged `ui/html` directory. Every page extends `base.html`.
Who:   Request handlers call `TemplateRenderer.render()`; the app factory
       mounts `STATIC_DIR` under /static.

Pages:
    pages/home.html     latest snippets (or an empty-state message)
    pages/view.html     one snippet
    pages/create.html   the create form, with field errors when re-rendered
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from snippetbox.schemas.snippet import FormState, SnippetRecord

UI_DIR = Path(__file__).parent / "ui"
TEMPLATES_DIR = UI_DIR / "html"
STATIC_DIR = UI_DIR / "static"


def human_date(value: Optional[datetime]) -> str:
    """Format a timestamp as e.g. '17 Mar 2024 at 10:15' in UTC."""
    if value is None:
        return ""
    # SQLite hands back naive datetimes; they are stored in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%d %b %Y at %H:%M")


@dataclass
class TemplateData:
    """Everything a page template may read."""
    current_year: int = field(default_factory=lambda: datetime.now(timezone.utc).year)
    snippet: Optional[SnippetRecord] = None
    snippets: List[SnippetRecord] = field(default_factory=list)
    form: FormState = field(default_factory=FormState)


class TemplateRenderer:
    """Owns the Jinja2 environment and renders named pages."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.templates = Jinja2Templates(directory=str(templates_dir))
        self.templates.env.filters["humanDate"] = human_date

    def render(
        self,
        request: Request,
        page: str,
        data: TemplateData,
        status_code: int = 200,
    ) -> HTMLResponse:
        """
        Render `pages/<page>` with `data` as the `data` template variable.

        Raises:
            jinja2.TemplateNotFound: unknown page name (a programming error,
            surfaced through the catch-all 500 handler).
        """
        return self.templates.TemplateResponse(
            request,
            f"pages/{page}",
            {"data": data},
            status_code=status_code,
        )
