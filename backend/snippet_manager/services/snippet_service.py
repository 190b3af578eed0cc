"""
Snippet Manager Backend — Snippet Service (Query Layer)
=========================================================

What:  Translates validated snippet commands into SQLAlchemy statements
       against the hosted datastore and shapes rows into response DTOs.
Why:   Keeps query building, owner scoping and DTO shaping out of the
       routes, so each can be tested with a mocked session.
How:   One SnippetService per request, bound to a principal-scoped session
       (see `Database.session_for`). Every statement carries an explicit
       `user_id = :owner` filter in addition to the datastore's row-level
       security policies.
Who:   Opened by routes through SnippetServiceFactory.

Not-found handling:
    Missing rows are a normal outcome, not an exception: `get`, `update`
    return None and `delete` returns False. A row owned by someone else is
    indistinguishable from a missing one. The route turns both into 404.

List pipeline (in order):
    owner = :user_id
    → language = :language               (optional)
    → tags && :tags                      (optional, any-tag overlap)
    → document @@ websearch_to_tsquery   (optional full-text search)
    → ORDER BY :sort :order
    → OFFSET (page - 1) * limit LIMIT limit
    plus a COUNT(*) over the same filters for the pagination block.
"""

import logging
import math
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import asc, delete, desc, func, insert, literal_column, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from snippet_manager.database import Database
from snippet_manager.models.snippet import Snippet
from snippet_manager.schemas.auth import Principal
from snippet_manager.schemas.snippet import (
    CreateSnippetCommand,
    DeleteSnippetCommand,
    GetSnippetByIdCommand,
    GetSnippetsCommand,
    PaginatedSnippetsResponse,
    PaginationMeta,
    SnippetResponse,
    UpdateSnippetCommand,
)

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "created_at": Snippet.created_at,
    "updated_at": Snippet.updated_at,
    "title": Snippet.title,
}

# Same expression as the idx_snippets_search index, so the planner can use it
SEARCH_CONFIG = literal_column("'english'::regconfig")
SEARCH_DOCUMENT = func.to_tsvector(
    SEARCH_CONFIG,
    Snippet.title
    + " "
    + func.coalesce(Snippet.description, "")
    + " "
    + func.coalesce(Snippet.ai_description, ""),
)


def to_snippet_response(row: Any) -> SnippetResponse:
    """
    Shape a stored row into the snippet DTO.

    Absent optional columns become null (text), [] (tags) or false
    (is_favorite), so the response field set never depends on the row.
    """
    return SnippetResponse(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        code=row.code,
        language=row.language,
        description=getattr(row, "description", None),
        ai_description=getattr(row, "ai_description", None),
        ai_explanation=getattr(row, "ai_explanation", None),
        tags=list(getattr(row, "tags", None) or []),
        is_favorite=bool(getattr(row, "is_favorite", None) or False),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); 0 when there is nothing to page through."""
    return math.ceil(total / limit) if total > 0 else 0


class SnippetService:
    """
    Owner-scoped CRUD and listing for snippets.

    Stateless apart from the session it wraps. Datastore failures surface
    from the session scope as DatabaseError; nothing is caught here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_snippets(self, command: GetSnippetsCommand) -> PaginatedSnippetsResponse:
        conditions = [Snippet.user_id == command.user_id]
        if command.language:
            conditions.append(Snippet.language == command.language)
        if command.tags:
            conditions.append(Snippet.tags.overlap(command.tags))
        if command.search:
            conditions.append(
                SEARCH_DOCUMENT.op("@@")(func.websearch_to_tsquery(SEARCH_CONFIG, command.search))
            )

        direction = asc if command.order == "asc" else desc
        stmt = (
            select(Snippet)
            .where(*conditions)
            .order_by(direction(SORT_COLUMNS[command.sort]))
            .offset((command.page - 1) * command.limit)
            .limit(command.limit)
        )
        result = await self.session.execute(stmt)
        rows = result.scalars().all()

        count_result = await self.session.execute(
            select(func.count()).select_from(Snippet).where(*conditions)
        )
        total = count_result.scalar_one() or 0

        logger.debug(
            "Listed %d of %d snippets (page=%d, limit=%d)",
            len(rows),
            total,
            command.page,
            command.limit,
        )
        return PaginatedSnippetsResponse(
            data=[to_snippet_response(row) for row in rows],
            pagination=PaginationMeta(
                page=command.page,
                limit=command.limit,
                total=total,
                total_pages=total_pages(total, command.limit),
            ),
        )

    async def get_snippet_by_id(self, command: GetSnippetByIdCommand) -> Optional[SnippetResponse]:
        result = await self.session.execute(
            select(Snippet).where(
                Snippet.id == command.id,
                Snippet.user_id == command.user_id,
            )
        )
        row = result.scalar_one_or_none()
        return to_snippet_response(row) if row is not None else None

    async def create_snippet(self, command: CreateSnippetCommand) -> SnippetResponse:
        """id, is_favorite and both timestamps are assigned by the datastore."""
        result = await self.session.execute(
            insert(Snippet)
            .values(
                user_id=command.user_id,
                title=command.title,
                code=command.code,
                language=command.language,
                description=command.description,
                tags=list(command.tags),
                ai_description=command.ai_description,
                ai_explanation=command.ai_explanation,
            )
            .returning(Snippet)
        )
        row = result.scalar_one()
        logger.info("Snippet %s created (language=%s)", row.id, row.language)
        return to_snippet_response(row)

    async def update_snippet(self, command: UpdateSnippetCommand) -> Optional[SnippetResponse]:
        """
        Apply exactly the supplied fields. updated_at is refreshed by the
        table trigger.

        The existence check and the write are two statements; a concurrent
        delete between them makes the write match nothing, which is also
        reported as None.
        """
        existing = await self.session.execute(
            select(Snippet.id).where(
                Snippet.id == command.id,
                Snippet.user_id == command.user_id,
            )
        )
        if existing.scalar_one_or_none() is None:
            return None

        result = await self.session.execute(
            update(Snippet)
            .where(Snippet.id == command.id, Snippet.user_id == command.user_id)
            .values(**command.updates)
            .returning(Snippet)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        logger.info("Snippet %s updated (fields=%s)", row.id, sorted(command.updates))
        return to_snippet_response(row)

    async def delete_snippet(self, command: DeleteSnippetCommand) -> bool:
        result = await self.session.execute(
            delete(Snippet).where(
                Snippet.id == command.id,
                Snippet.user_id == command.user_id,
            )
        )
        if result.rowcount == 0:
            return False
        logger.info("Snippet %s deleted", command.id)
        return True


class SnippetServiceFactory:
    """
    Opens a SnippetService bound to one principal's transaction.

    Example:
        async with factory.open(principal) as snippets:
            page = await snippets.get_snippets(command)
    """

    def __init__(self, database: Database):
        self.database = database

    @asynccontextmanager
    async def open(self, principal: Principal) -> AsyncIterator[SnippetService]:
        async with self.database.session_for(principal) as session:
            yield SnippetService(session)
