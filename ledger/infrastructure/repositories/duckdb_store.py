# ledger/infrastructure/repositories/duckdb_store.py
#
# Transactional store over DuckDB.
#
# Design decisions:
#   - One cursor (DuckDB's duplicate connection) per transaction, so the store
#     can be shared across threads; the parent connection is never used to run
#     statements directly.
#   - DuckDB uses optimistic MVCC. Two transactions that write the same row
#     (every ledger write touches its company row) conflict: the loser gets a
#     TransactionException (or a ConstraintException when both inserted the
#     same primary key). The loser is rolled back and the whole unit of work
#     is re-run against a fresh snapshot.
#   - Only duplicate-key ConstraintExceptions count as conflicts. Any other
#     duckdb.Error (NOT NULL, CHECK, ...) is wrapped in StoreError and not
#     retried.
#
# Invariants:
#   - work() either commits completely or leaves no trace.
#   - A LedgerFailure raised by work() rolls back and propagates unchanged;
#     domain failures are never retried.
from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeVar

import duckdb

from ledger.domain.errors import StoreError, TransactionConflict
from ledger.infrastructure.log import get_logger

from .duckdb_audit_repo import DuckDBAuditLogSink
from .duckdb_ownership_repo import DuckDBCompanyRepo, DuckDBOwnershipRepo, DuckDBRoleRepo
from .duckdb_verification_repo import (
    DuckDBFraudDisputeRepo,
    DuckDBMasterAccountRepo,
    DuckDBVerificationRepo,
)

T = TypeVar("T")

_DUPLICATE_KEY_MARKER = "duplicate key"

_logger = get_logger("store")


def _is_conflict(err: duckdb.Error) -> bool:
    if isinstance(err, duckdb.TransactionException):
        return True
    return _DUPLICATE_KEY_MARKER in str(err).lower()


class DuckDBUnitOfWork:
    def __init__(self, cursor: duckdb.DuckDBPyConnection) -> None:
        self.accounts = DuckDBMasterAccountRepo(cursor)
        self.ownerships = DuckDBOwnershipRepo(cursor)
        self.roles = DuckDBRoleRepo(cursor)
        self.companies = DuckDBCompanyRepo(cursor)
        self.verifications = DuckDBVerificationRepo(cursor)
        self.disputes = DuckDBFraudDisputeRepo(cursor)
        self.audit = DuckDBAuditLogSink(cursor)


class DuckDBStore:
    def __init__(self, conn: duckdb.DuckDBPyConnection, max_attempts: int = 5) -> None:
        self._conn = conn
        self._max_attempts = max(1, max_attempts)
        self._cursor_lock = threading.Lock()

    def run_transaction(self, work: Callable[[DuckDBUnitOfWork], T]) -> T:
        last_conflict: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            with self._cursor_lock:
                cursor = self._conn.cursor()
            try:
                cursor.begin()
                try:
                    result = work(DuckDBUnitOfWork(cursor))
                except BaseException:
                    cursor.rollback()
                    raise
                cursor.commit()
                return result
            except (duckdb.TransactionException, duckdb.ConstraintException) as err:
                if not _is_conflict(err):
                    raise StoreError(str(err)) from err
                last_conflict = err
                _logger.warning("Transaction conflict (attempt %d/%d): %s", attempt, self._max_attempts, err)
            except duckdb.Error as err:
                raise StoreError(str(err)) from err
            finally:
                cursor.close()

        raise TransactionConflict(
            f"Transaction aborted after {self._max_attempts} conflicting attempts"
        ) from last_conflict
