# Routes package init
"""
Snippetbox — HTTP Routes Package
==================================

What:  The route table, the snippet handlers and their error helpers.

Modules:
    - dispatch.py:  ROUTES table, build_router(), static mount
    - snippets.py:  SnippetHandlers (home, view, create form, create submit)
    - helpers.py:   not_found / client_error / server_error responses

Design Principle:
    Handlers stay thin: parse input, call the storage model once, map its
    errors to a status, hand the result to the renderer.
"""
