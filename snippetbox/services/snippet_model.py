"""
Snippetbox — Snippet Model (Storage Layer)
============================================

What:  The three data operations on snippets: insert, get-by-id and latest.
How:   Each call opens its own AsyncSession from the shared session factory
       (one pooled connection per operation), runs a single parameterized
       statement and returns immutable SnippetRecord objects.
Who:   Called by the request handlers through the Application context.

Error Contract:
    NoRecordError   get() found no snippet with that id whose expiry is still
                    in the future
    StorageError    any other failure (SQLAlchemy, driver, connection), with the
                    original exception chained as __cause__
    ValidationError insert() was called with a blank title/content or a
                    non-positive day count; raised before any SQL runs

This module never logs. It classifies failures and raises; the handlers
decide what gets logged and what the client sees.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.exceptions import NoRecordError, StorageError, ValidationError
from snippetbox.models.snippet import ID_MAX, Snippet
from snippetbox.schemas.snippet import SnippetRecord

# Number of snippets shown on the home page
LATEST_LIMIT = 10

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SnippetModel:
    """
    Storage operations for snippets.

    Args:
        session_factory: async_sessionmaker bound to the application's engine.
        clock: returns the current UTC time. Injected so expiry can be tested
               without waiting for real days to pass.

    Concurrency:
        Instances hold no per-request state and are shared by every request.
        Concurrent inserts run in separate sessions/connections; the database
        assigns each one a distinct id.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utc_now,
    ):
        self._session_factory = session_factory
        self._clock = clock

    async def insert(self, title: str, content: str, expires_days: int) -> int:
        """
        Store a new snippet and return its identifier.

        created = now, expires = now + expires_days days.

        Raises:
            ValidationError: blank title/content or expires_days < 1
            StorageError: the insert or commit failed
        """
        self._validate_insert(title, content, expires_days)

        now = self._clock()
        row = Snippet(
            title=title,
            content=content,
            created=now,
            expires=now + timedelta(days=expires_days),
        )

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(row)
                    # flush assigns the autoincrement id inside the transaction
                    await session.flush()
                    snippet_id = row.id
        except Exception as e:
            raise StorageError(
                message="Could not store the snippet",
                context={"operation": "insert", "error_type": type(e).__name__},
            ) from e

        return snippet_id

    async def get(self, snippet_id: int) -> SnippetRecord:
        """
        Fetch one active snippet.

        Raises:
            NoRecordError: no snippet with that id, or it has expired
            StorageError: the query failed
        """
        # Ids outside the column range cannot exist; the driver would reject them
        if not 1 <= snippet_id <= ID_MAX:
            raise NoRecordError(snippet_id=snippet_id)

        stmt = select(Snippet).where(
            Snippet.id == snippet_id,
            Snippet.expires > self._clock(),
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()
        except Exception as e:
            raise StorageError(
                message="Could not retrieve the snippet",
                context={
                    "operation": "get",
                    "snippet_id": snippet_id,
                    "error_type": type(e).__name__,
                },
            ) from e

        if row is None:
            raise NoRecordError(snippet_id=snippet_id)
        return SnippetRecord.model_validate(row)

    async def latest(self) -> List[SnippetRecord]:
        """
        Return up to LATEST_LIMIT active snippets, newest (highest id) first.

        An empty store yields an empty list, not an error.

        Raises:
            StorageError: the query failed
        """
        stmt = (
            select(Snippet)
            .where(Snippet.expires > self._clock())
            .order_by(Snippet.id.desc())
            .limit(LATEST_LIMIT)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
        except Exception as e:
            raise StorageError(
                message="Could not retrieve the latest snippets",
                context={"operation": "latest", "error_type": type(e).__name__},
            ) from e

        return [SnippetRecord.model_validate(row) for row in rows]

    @staticmethod
    def _validate_insert(title: str, content: str, expires_days: int) -> None:
        errors = {}
        if not isinstance(title, str) or not title.strip():
            errors["title"] = "This field cannot be blank"
        if not isinstance(content, str) or not content.strip():
            errors["content"] = "This field cannot be blank"
        # bool is an int subclass; True is not a day count
        if (
            isinstance(expires_days, bool)
            or not isinstance(expires_days, int)
            or expires_days < 1
        ):
            errors["expires"] = "Expiry must be a positive number of days"
        if errors:
            raise ValidationError(field_errors=errors, message="Invalid snippet")
