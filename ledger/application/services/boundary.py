"""Public-boundary policy shared by the ledger services.

Mutations: domain failures and store failures become Result.fail, never a
raised exception. Queries: any failure is logged and reads as an empty list.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import TypeVar

from ledger.domain.errors import LedgerError, LedgerFailure, Result
from ledger.domain.unit_of_work import Store, UnitOfWork

T = TypeVar("T")


def new_id() -> str:
    return uuid.uuid4().hex


def execute(
    store: Store,
    operation: str,
    work: Callable[[UnitOfWork], T],
    logger: logging.Logger,
) -> Result[T]:
    try:
        value = store.run_transaction(work)
    except LedgerFailure as failure:
        logger.info("%s rejected (%s): %s", operation, failure.error.kind.value, failure.error.message)
        return Result.fail(failure.error)
    except Exception:
        logger.exception("%s failed", operation)
        return Result.fail(LedgerError.store_failure(f"Failed to {operation}"))
    return Result.ok(value)


def query(
    store: Store,
    operation: str,
    work: Callable[[UnitOfWork], list[T]],
    logger: logging.Logger,
) -> list[T]:
    try:
        return store.run_transaction(work)
    except Exception:
        logger.exception("%s failed", operation)
        return []
