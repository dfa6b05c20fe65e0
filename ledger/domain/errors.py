# ledger/domain/errors.py
#
# Closed error taxonomy for the ledger and the verification workflow.
#
# Design decisions:
#   - LedgerError is a frozen value carrying a kind, a display message and a
#     structured context mapping. Callers that want their own wording read
#     the context (e.g. current_total / attempted) instead of parsing text.
#   - LedgerFailure is the only exception raised by the core. It is raised
#     inside a store transaction to abort it and converted into a Result at
#     the public boundary (services never let it escape).
#   - Messages mirror the wording shown to end users by the mobile app.
#
# Invariants:
#   - Every LedgerError.message is non-empty and human-readable.
#   - Result.success is True iff error is None.
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFoundError"
    PERMISSION = "PermissionError"
    INVARIANT_VIOLATION = "InvariantViolation"
    CONFLICT = "ConflictError"
    STORE = "StoreError"


def format_percentage(value: Decimal) -> str:
    """40.0000 -> '40', 33.3300 -> '33.33'."""
    normalized = value.normalize()
    return format(normalized, "f")


@dataclass(frozen=True)
class LedgerError:
    kind: ErrorKind
    message: str
    context: dict[str, object] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    # --- Validation -------------------------------------------------------

    @classmethod
    def percentage_out_of_range(cls, attempted: object) -> LedgerError:
        return cls(
            ErrorKind.VALIDATION,
            "Ownership percentage must be between 0 and 100",
            {"attempted": attempted},
        )

    @classmethod
    def invalid_input(cls, message: str, **context: object) -> LedgerError:
        return cls(ErrorKind.VALIDATION, message, dict(context))

    # --- Not found --------------------------------------------------------

    @classmethod
    def not_found(cls, entity: str, entity_id: str) -> LedgerError:
        return cls(ErrorKind.NOT_FOUND, f"{entity} not found", {"entity": entity, "id": entity_id})

    # --- Permission -------------------------------------------------------

    @classmethod
    def not_eligible_to_own(cls, master_account_id: str) -> LedgerError:
        return cls(
            ErrorKind.PERMISSION,
            "Master account must be verified before owning companies",
            {"master_account_id": master_account_id},
        )

    # --- Invariant --------------------------------------------------------

    @classmethod
    def total_would_exceed(cls, current_total: Decimal, attempted: Decimal) -> LedgerError:
        return cls(
            ErrorKind.INVARIANT_VIOLATION,
            f"Cannot add {format_percentage(attempted)}% ownership. "
            f"Current total: {format_percentage(current_total)}%. Would exceed 100%.",
            {"current_total": current_total, "attempted": attempted},
        )

    @classmethod
    def others_would_exceed(cls, other_total: Decimal, attempted: Decimal) -> LedgerError:
        return cls(
            ErrorKind.INVARIANT_VIOLATION,
            f"Cannot change to {format_percentage(attempted)}%. "
            f"Other owners total: {format_percentage(other_total)}%. Would exceed 100%.",
            {"other_total": other_total, "attempted": attempted},
        )

    # --- Conflict ---------------------------------------------------------

    @classmethod
    def conflict(cls, message: str, **context: object) -> LedgerError:
        return cls(ErrorKind.CONFLICT, message, dict(context))

    @classmethod
    def duplicate_national_id(cls, existing_account_id: str, existing_account_name: str) -> LedgerError:
        return cls(
            ErrorKind.CONFLICT,
            f"This national ID number is already registered to {existing_account_name}. "
            "Please report this if you believe this is an error.",
            {"existing_account_id": existing_account_id, "existing_account_name": existing_account_name},
        )

    # --- Store ------------------------------------------------------------

    @classmethod
    def store_failure(cls, message: str) -> LedgerError:
        return cls(ErrorKind.STORE, message)


class LedgerFailure(Exception):
    """Raised inside the core to abort the current transaction."""

    def __init__(self, error: LedgerError) -> None:
        super().__init__(error.message)
        self.error = error


class StoreError(Exception):
    """Infrastructure failure surfaced by a store implementation."""


class TransactionConflict(StoreError):
    """Concurrent write detected; the transaction may be retried."""


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: LedgerError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, error: LedgerError) -> Result[T]:
        return cls(error=error)
