# tests/integration/conftest.py
from __future__ import annotations

from collections.abc import Generator

import duckdb
import pytest
from fastapi.testclient import TestClient

from ledger.infrastructure.duckdb_connection import apply_schema


@pytest.fixture()
def test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """In-memory DuckDB with the ledger schema and deterministic accounts."""
    conn = duckdb.connect(":memory:")
    apply_schema(conn)

    # --- Master accounts (a, b, c verified; u unverified; h holds a national ID) ---
    conn.execute("""
        INSERT INTO master_accounts (
            id, name, national_id_number, can_own_companies, can_receive_payouts,
            can_approve_ownership_changes, id_verification_status, created_at
        ) VALUES
        ('h', 'Helen', '8001015009087', FALSE, FALSE, FALSE, 'NOT_SUBMITTED', '2024-01-01 09:00:00'),
        ('a', 'Alice', NULL, TRUE, TRUE, TRUE, 'VERIFIED', '2024-02-01 09:00:00'),
        ('b', 'Bob',   NULL, TRUE, TRUE, TRUE, 'VERIFIED', '2024-02-02 09:00:00'),
        ('c', 'Carol', NULL, TRUE, TRUE, TRUE, 'VERIFIED', '2024-02-03 09:00:00'),
        ('u', 'Uma',   NULL, FALSE, FALSE, FALSE, 'NOT_SUBMITTED', '2024-03-01 09:00:00')
    """)

    yield conn
    conn.close()


@pytest.fixture()
def client(test_db: duckdb.DuckDBPyConnection) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with the in-memory DuckDB injected."""
    from ledger.infrastructure import duckdb_connection
    duckdb_connection.set_connection(test_db)

    from ledger.infrastructure.config import get_settings
    get_settings.cache_clear()

    from ledger.interfaces.api.main import app
    with TestClient(app) as c:
        yield c
