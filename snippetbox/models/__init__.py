"""
Snippetbox — ORM Models
=========================

Importing this package registers every table on `Base.metadata`
(Alembic's env.py and `database.create_schema()` rely on that).
"""

from snippetbox.models.snippet import Snippet

__all__ = ["Snippet"]
