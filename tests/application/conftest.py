# tests/application/conftest.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from ledger.application.services.id_verification import IdVerificationService
from ledger.application.services.ownership_ledger import OwnershipLedger
from ledger.domain.verification.entities import MasterAccount
from ledger.domain.verification.enums import IdVerificationStatus
from ledger.infrastructure.repositories.memory_store import InMemoryStore


class TickingClock:
    """Deterministic clock: every read is one second after the previous one."""

    def __init__(self) -> None:
        self.current = datetime(2025, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def verified(account_id: str, name: str, national_id: str | None = None) -> MasterAccount:
    return MasterAccount(
        id=account_id,
        name=name,
        national_id_number=national_id,
        can_own_companies=True,
        can_receive_payouts=True,
        can_approve_ownership_changes=True,
        id_verification_status=IdVerificationStatus.VERIFIED,
    )


def unverified(account_id: str, name: str, national_id: str | None = None) -> MasterAccount:
    return MasterAccount(id=account_id, name=name, national_id_number=national_id)


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore(
        accounts=[
            verified("a", "Alice"),
            verified("b", "Bob"),
            verified("c", "Carol"),
            unverified("u", "Uma"),
        ],
        clock=TickingClock(),
    )


@pytest.fixture()
def ledger(store: InMemoryStore) -> OwnershipLedger:
    return OwnershipLedger(store)


@pytest.fixture()
def verification(store: InMemoryStore) -> IdVerificationService:
    return IdVerificationService(store)


@pytest.fixture()
def account_of(store: InMemoryStore) -> Callable[[str], MasterAccount]:
    def read(account_id: str) -> MasterAccount:
        account = store.run_transaction(lambda uow: uow.accounts.get(account_id))
        assert account is not None
        return account

    return read
