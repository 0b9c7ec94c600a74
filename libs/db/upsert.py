"""Dialect-aware ``INSERT ... ON CONFLICT`` construction.

PostgreSQL and SQLite both support ``ON CONFLICT`` and ``RETURNING``, but
SQLAlchemy exposes them through dialect-specific ``insert`` constructs.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_insert(db: AsyncSession, model):
    """Return an ``Insert`` for ``model`` that supports ``on_conflict_*``."""
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect](model)
    except KeyError:
        raise NotImplementedError(
            f"ON CONFLICT is not supported on {dialect}"
        ) from None
