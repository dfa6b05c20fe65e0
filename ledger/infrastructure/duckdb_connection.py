from __future__ import annotations

from pathlib import Path

import duckdb

from .config import get_settings

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_connection: duckdb.DuckDBPyConnection | None = None


def apply_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create missing tables. schema.sql only uses CREATE ... IF NOT EXISTS."""
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))


def get_connection() -> duckdb.DuckDBPyConnection:
    global _connection  # noqa: PLW0603
    if _connection is None:
        conn = duckdb.connect(get_settings().duckdb_path)
        apply_schema(conn)
        _connection = conn
    return _connection


def set_connection(conn: duckdb.DuckDBPyConnection) -> None:
    """Used in tests to inject an in-memory DuckDB."""
    global _connection  # noqa: PLW0603
    _connection = conn
