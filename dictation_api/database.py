"""Async engine, session factory and schema bootstrap for the dictation tables."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from dictation_api.config.settings import settings

# Importing the package registers every table on Base.metadata.
from dictation_api.models import Base

logger = logging.getLogger(__name__)

_SCHEMA_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _normalise_schema_name(raw_schema: str | None) -> str | None:
    """Return a usable schema name, or None to stay on the default search_path."""

    schema = (raw_schema or "").strip()
    if not schema:
        return None
    if not _SCHEMA_NAME_PATTERN.fullmatch(schema):
        logger.warning("Ignoring invalid schema name '%s'.", raw_schema)
        return None
    return schema


def _create_engine() -> AsyncEngine:
    """Create the async engine; serverless databases get no connection pool."""

    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if settings.database.serverless:
        options["poolclass"] = NullPool
    return create_async_engine(settings.database.url, **options)


engine: AsyncEngine = _create_engine()

# Schemas are a PostgreSQL concept; other backends keep their default namespace.
_SCHEMA_NAME = (
    _normalise_schema_name(settings.database.schema_name)
    if engine.dialect.name == "postgresql"
    else None
)

if _SCHEMA_NAME:
    for table in Base.metadata.tables.values():
        if table.schema is None:
            table.schema = _SCHEMA_NAME

SessionFactory = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def _ensure_search_path(target: Any) -> None:
    if _SCHEMA_NAME:
        await target.execute(text(f'SET search_path TO "{_SCHEMA_NAME}", public'))


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Yield a session; anything left uncommitted is rolled back on close."""

    async with SessionFactory() as session:
        await _ensure_search_path(session)
        yield session


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""

    async with session_scope() as session:
        yield session


async def init_models() -> None:
    """Create the schema (when configured) and any missing tables."""

    async with engine.begin() as conn:
        if _SCHEMA_NAME:
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{_SCHEMA_NAME}"'))
        await _ensure_search_path(conn)
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Ensured dictation tables in %s.",
        f"schema '{_SCHEMA_NAME}'" if _SCHEMA_NAME else "the default schema",
    )


async def ping_database() -> bool:
    """Return True when a trivial query succeeds."""

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Database ping failed", exc_info=True)
        return False
    return True


async def dispose_engine() -> None:
    """Dispose of the engine and release pooled connections."""

    await engine.dispose()
