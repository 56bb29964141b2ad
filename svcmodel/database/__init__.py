"""Database package."""

from svcmodel.database.session import (
    build_database_url,
    create_db_engine,
    create_sqlite_engine,
    create_session_factory,
    session_scope,
    create_all_tables,
)

__all__ = [
    "build_database_url",
    "create_db_engine",
    "create_sqlite_engine",
    "create_session_factory",
    "session_scope",
    "create_all_tables",
]
