"""
Snippet Manager Backend — Datastore Session Management
========================================================

What:  Async SQLAlchemy engine, session factory, and the per-principal
       session scope used by every snippet operation.
Why:   Authorization is enforced by the datastore's row-level security
       policies (`auth.uid() = user_id`). Each transaction therefore runs as
       the calling user, never as an administrative principal.
How:   `Database` is constructed once by `create_app()` from Settings and
       injected wherever a session is needed. `session_for(principal)` opens
       a session, switches the transaction to the RLS role with the caller's
       JWT claims, and commits or rolls back when the block exits.

Connection Pooling:
    Pool sizing (pool_size / max_overflow / pre-ping / recycle) is owned by
    SQLAlchemy; this module only passes the configured values through.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippet_manager.config import Settings
from snippet_manager.error_handler import extract_sqlstate
from snippet_manager.exceptions import DatabaseError
from snippet_manager.schemas.auth import Principal

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object so Alembic sees every table.
    """

    pass


# Transaction-local: both settings revert when the transaction ends, so a
# pooled connection never carries one user's identity into the next request.
_SCOPE_SQL = text(
    "SELECT set_config('role', :role, true), "
    "set_config('request.jwt.claims', :claims, true)"
)


class Database:
    """
    Owns the async engine and hands out principal-scoped sessions.

    Example:
        async with database.session_for(principal) as session:
            result = await session.execute(select(Snippet))
    """

    def __init__(
        self,
        engine: AsyncEngine,
        rls_role: str = "authenticated",
        apply_rls_scope: bool = True,
    ):
        self.engine = engine
        self.rls_role = rls_role
        self.apply_rls_scope = apply_rls_scope
        # expire_on_commit=False: rows stay readable after commit when the
        # service shapes them into DTOs
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        return cls(
            engine,
            rls_role=settings.db_rls_role,
            apply_rls_scope=settings.db_apply_rls_scope,
        )

    def scope_claims(self, principal: Principal) -> str:
        """JWT claims the RLS policies read through `auth.uid()`."""
        return json.dumps({"sub": principal.user_id, "role": self.rls_role})

    @asynccontextmanager
    async def session_for(self, principal: Principal) -> AsyncIterator[AsyncSession]:
        """
        Open a transaction scoped to `principal`.

        The bearer token itself is not sent to the datastore. It was already
        verified by the auth provider in `require_auth`; what reaches Postgres
        is the resulting identity, asserted on the pooled connection by
        switching to the RLS role and setting `request.jwt.claims` to
        `{"sub": user_id, "role": ...}`. The policies read `auth.uid()` from
        those claims, so they see the same user a forwarded token would
        carry. The connection credential must therefore be allowed to
        `SET ROLE` to `db_rls_role`.

        On success: commit. On any error: roll back. SQLAlchemy failures are
        re-raised as DatabaseError carrying the driver's SQLSTATE; the
        original exception is chained for the error log.
        """
        async with self._session_factory() as session:
            try:
                if self.apply_rls_scope:
                    await session.execute(
                        _SCOPE_SQL,
                        {"role": self.rls_role, "claims": self.scope_claims(principal)},
                    )
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                sqlstate = extract_sqlstate(exc)
                logger.warning("Datastore operation failed (sqlstate=%s)", sqlstate)
                raise DatabaseError(
                    sqlstate=sqlstate,
                    context={"user_id": principal.user_id, "driver_error": type(exc).__name__},
                ) from exc
            except BaseException:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Round-trip `SELECT 1`. Raises when the datastore is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()
