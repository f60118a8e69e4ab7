"""Snippetbox — Pydantic schemas (records handed to handlers, form validation)."""
