# Middleware package init
"""
Snippetbox — Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [Common Headers] → Route Handler

    - Request ID first so the access log line carries it
    - Logging measures everything below it, header stamping included
    - Common headers are set on every response, error pages too
"""
