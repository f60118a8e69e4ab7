"""
Snippetbox — Route Table & Dispatcher
=======================================

What:  Binds (method, path) pairs to snippet handlers.
How:   `ROUTES` is a static, declarative table. Each entry names its handler
       and the converter for every `{placeholder}` in its path.
       `build_router()` turns the table into a FastAPI APIRouter whose
       endpoints convert path parameters before calling the handler.

Matching rules (Starlette):
    - literal segments match exactly and case-sensitively
    - unknown path                         → 404
    - known path, method not in the table  → 405 with an Allow header
    - placeholder that fails to convert    → 404, the handler never runs

Route Inventory:
    GET   /                     home
    GET   /snippet/view/{id}    snippet_view
    GET   /snippet/create       snippet_create
    POST  /snippet/create       snippet_create_post
    GET   /static/*             static assets (StaticFiles mount)
"""

import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles

from snippetbox.application import Application
from snippetbox.models.snippet import ID_MAX
from snippetbox.routes.helpers import not_found
from snippetbox.routes.snippets import SnippetHandlers
from snippetbox.templating import STATIC_DIR

ParamConverter = Callable[[str], Any]
Handler = Callable[..., Awaitable[Response]]

STATIC_PREFIX = "/static"

_DIGITS = re.compile(r"[0-9]+")


def parse_int(raw: str) -> int:
    """Convert a path segment of ASCII digits to an int in [0, ID_MAX]."""
    if not _DIGITS.fullmatch(raw):
        raise ValueError(f"not a non-negative integer: {raw!r}")
    value = int(raw)
    if value > ID_MAX:
        raise ValueError(f"out of range: {raw!r}")
    return value


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: str
    params: Mapping[str, ParamConverter] = field(default_factory=dict)


ROUTES = (
    Route("GET", "/", "home"),
    Route("GET", "/snippet/view/{id}", "snippet_view", {"id": parse_int}),
    Route("GET", "/snippet/create", "snippet_create"),
    Route("POST", "/snippet/create", "snippet_create_post"),
)


def _bind(route: Route, handler: Handler) -> Callable[[Request], Awaitable[Response]]:
    async def endpoint(request: Request) -> Response:
        params: Dict[str, Any] = {}
        for name, convert in route.params.items():
            try:
                params[name] = convert(request.path_params[name])
            except (KeyError, ValueError):
                return not_found()
        return await handler(request, **params)

    endpoint.__name__ = route.endpoint
    return endpoint


def build_router(app: Application, routes: Iterable[Route] = ROUTES) -> APIRouter:
    """
    Build the APIRouter for `routes`, with handlers bound to `app`.

    Raises:
        AttributeError: a route names a handler SnippetHandlers does not have.
    """
    handlers = SnippetHandlers(app)
    router = APIRouter()
    for route in routes:
        handler = getattr(handlers, route.endpoint)
        router.add_api_route(
            route.path,
            _bind(route, handler),
            methods=[route.method],
            name=route.endpoint,
            response_model=None,
            include_in_schema=False,
        )
    return router


def mount_static(app: FastAPI) -> None:
    """Serve packaged assets under /static. Directories and missing files → 404."""
    app.mount(STATIC_PREFIX, StaticFiles(directory=str(STATIC_DIR)), name="static")
