"""Dialect-aware INSERT constructs for upserts."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.core.exceptions import SEOEngineError

SUPPORTED_UPSERT_DIALECTS = ("postgresql", "sqlite")


def upsert_insert(session: AsyncSession, model_cls: type[Any]) -> Any:
    """Return an INSERT supporting ``on_conflict_do_update`` for the session's backend."""
    dialect_name = session.get_bind().dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(model_cls)
    if dialect_name == "sqlite":
        return sqlite.insert(model_cls)
    raise SEOEngineError(
        f"Upserts are only supported on {', '.join(SUPPORTED_UPSERT_DIALECTS)}; got {dialect_name}",
        {"dialect": dialect_name},
    )
