from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

from ledger.domain.audit.repository import AuditLogSink
from ledger.domain.ownership.repository import CompanyRepository, OwnershipRepository, RoleRepository
from ledger.domain.verification.repository import (
    FraudDisputeRepository,
    MasterAccountRepository,
    VerificationRepository,
)

T = TypeVar("T")


class UnitOfWork(Protocol):
    """Repositories bound to one open transaction."""
    accounts: MasterAccountRepository
    ownerships: OwnershipRepository
    roles: RoleRepository
    companies: CompanyRepository
    verifications: VerificationRepository
    disputes: FraudDisputeRepository
    audit: AuditLogSink


class Store(Protocol):
    def run_transaction(self, work: Callable[[UnitOfWork], T]) -> T:
        """Run work inside one transaction and commit.

        If work raises, nothing is written and the exception propagates.
        Conflicting concurrent commits are retried by calling work again
        with a fresh unit of work; exhausting the retries raises
        TransactionConflict.
        """
        ...
