"""
Snippetbox — Application Context
==================================

What:  The bundle of dependencies every request handler needs.
How:   Built once by `create_app()` and passed by reference to
       `build_router()`, which binds it into each handler. Nothing here is
       module-level state.
"""

import logging
from dataclasses import dataclass

from snippetbox.services.snippet_model import SnippetModel
from snippetbox.templating import TemplateRenderer


@dataclass(frozen=True)
class Application:
    logger: logging.Logger
    snippets: SnippetModel
    templates: TemplateRenderer
