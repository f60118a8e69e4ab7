"""
Snippetbox — Package Initializer
==================================

What: A small web application for sharing text snippets that expire.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Routes (table + handlers)         │  ← HTTP concerns, error → status
    ├─────────────────────────────────────┤
    │   Services (SnippetModel)           │  ← insert / get / latest
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (async engine + pool)    │
    └─────────────────────────────────────┘

    Rendering (Jinja2 templates) and static assets sit beside the routes.
"""

__version__ = "1.0.0"
