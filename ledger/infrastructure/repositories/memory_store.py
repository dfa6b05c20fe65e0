# ledger/infrastructure/repositories/memory_store.py
#
# In-process store implementing the same protocols as DuckDBStore.
#
# Design decisions:
#   - Pessimistic: one lock serialises transactions, so conflicts cannot
#     happen and nothing is ever retried.
#   - Each transaction works on shallow copies of the tables (entities are
#     frozen, so copying the dicts is enough) and swaps them in on success.
#     An exception leaves the committed tables untouched.
#   - The clock is read once per transaction, mirroring DuckDB's
#     current_timestamp semantics.
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import TypeVar

from ledger.domain.audit.entities import AuditLogEntry
from ledger.domain.ownership.entities import Company, CompanyOwnership, CompanyRole
from ledger.domain.ownership.enums import OwnershipStatus, RoleStatus
from ledger.domain.verification.entities import (
    FraudDispute,
    MasterAccount,
    MasterIDVerification,
    SupportingDocument,
)
from ledger.domain.verification.enums import DuplicateIdStatus, IdVerificationStatus
from ledger.domain.verification.value_objects import normalize_national_id

T = TypeVar("T")


@dataclass
class _Tables:
    accounts: dict[str, MasterAccount] = field(default_factory=dict)
    ownerships: dict[str, CompanyOwnership] = field(default_factory=dict)
    roles: dict[str, CompanyRole] = field(default_factory=dict)
    companies: dict[str, Company] = field(default_factory=dict)
    verifications: dict[str, MasterIDVerification] = field(default_factory=dict)
    disputes: dict[str, FraudDispute] = field(default_factory=dict)
    audit: list[AuditLogEntry] = field(default_factory=list)

    def copy(self) -> _Tables:
        return _Tables(
            accounts=dict(self.accounts),
            ownerships=dict(self.ownerships),
            roles=dict(self.roles),
            companies=dict(self.companies),
            verifications=dict(self.verifications),
            disputes=dict(self.disputes),
            audit=list(self.audit),
        )


class _MemoryMasterAccountRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, master_account_id: str) -> MasterAccount | None:
        return self._t.accounts.get(master_account_id)

    def find_by_national_id(self, national_id_number: str) -> list[MasterAccount]:
        wanted = normalize_national_id(national_id_number)
        holders = [
            a
            for a in self._t.accounts.values()
            if a.national_id_number is not None and normalize_national_id(a.national_id_number) == wanted
        ]
        return sorted(holders, key=lambda a: a.created_at or datetime.min)

    def link_company(self, master_account_id: str, company_id: str) -> None:
        account = self._t.accounts[master_account_id]
        if company_id in account.company_ids:
            return
        self._save(account, company_ids=(*account.company_ids, company_id))

    def flag_duplicate_id(self, master_account_id: str, national_id_number: str) -> None:
        self._save(
            self._t.accounts[master_account_id],
            duplicate_id_status=DuplicateIdStatus.DUPLICATE_DETECTED,
            national_id_number=national_id_number,
        )

    def mark_verification_pending(
        self,
        master_account_id: str,
        national_id_number: str,
        document_url: str,
    ) -> None:
        self._save(
            self._t.accounts[master_account_id],
            national_id_number=national_id_number,
            id_verification_status=IdVerificationStatus.PENDING_REVIEW,
            id_document_url=document_url,
            duplicate_id_status=DuplicateIdStatus.NONE,
        )

    def mark_verified(self, master_account_id: str, admin_id: str) -> None:
        self._save(
            self._t.accounts[master_account_id],
            id_verification_status=IdVerificationStatus.VERIFIED,
            id_verified_at=self._now,
            id_verified_by=admin_id,
            can_own_companies=True,
            can_receive_payouts=True,
            can_approve_ownership_changes=True,
        )

    def mark_rejected(self, master_account_id: str, reason: str) -> None:
        self._save(
            self._t.accounts[master_account_id],
            id_verification_status=IdVerificationStatus.REJECTED,
            restriction_reason=reason,
        )

    def _save(self, account: MasterAccount, **changes: object) -> None:
        self._t.accounts[account.id] = replace(account, updated_at=self._now, **changes)  # type: ignore[arg-type]


class _MemoryOwnershipRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, ownership_id: str) -> CompanyOwnership | None:
        return self._t.ownerships.get(ownership_id)

    def list_by_company(self, company_id: str, include_inactive: bool = False) -> list[CompanyOwnership]:
        return [
            o
            for o in self._t.ownerships.values()
            if o.company_id == company_id and (include_inactive or o.is_active)
        ]

    def list_by_master_account(
        self,
        master_account_id: str,
        include_inactive: bool = False,
    ) -> list[CompanyOwnership]:
        return [
            o
            for o in self._t.ownerships.values()
            if o.master_account_id == master_account_id and (include_inactive or o.is_active)
        ]

    def add(self, ownership: CompanyOwnership) -> None:
        self._t.ownerships[ownership.id] = replace(
            ownership,
            approved_by=ownership.approved_by or ownership.granted_by,
            granted_at=self._now,
            approved_at=self._now,
            created_at=self._now,
            updated_at=self._now,
        )

    def update_percentage(self, ownership_id: str, percentage: Decimal) -> None:
        current = self._t.ownerships[ownership_id]
        self._t.ownerships[ownership_id] = replace(current, ownership_percentage=percentage, updated_at=self._now)

    def revoke(self, ownership_id: str, revoked_by: str) -> None:
        current = self._t.ownerships[ownership_id]
        self._t.ownerships[ownership_id] = replace(
            current,
            status=OwnershipStatus.REVOKED,
            revoked_by=revoked_by,
            revoked_at=self._now,
            updated_at=self._now,
        )


class _MemoryRoleRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, role_id: str) -> CompanyRole | None:
        return self._t.roles.get(role_id)

    def list_by_master_account(
        self,
        master_account_id: str,
        company_id: str | None = None,
        include_inactive: bool = False,
    ) -> list[CompanyRole]:
        return [
            r
            for r in self._t.roles.values()
            if r.master_account_id == master_account_id
            and (company_id is None or r.company_id == company_id)
            and (include_inactive or r.is_active)
        ]

    def add(self, role: CompanyRole) -> None:
        self._t.roles[role.id] = replace(role, assigned_at=self._now, created_at=self._now, updated_at=self._now)

    def revoke(self, role_id: str, revoked_by: str) -> None:
        current = self._t.roles[role_id]
        self._t.roles[role_id] = replace(
            current,
            status=RoleStatus.REVOKED,
            revoked_by=revoked_by,
            revoked_at=self._now,
            updated_at=self._now,
        )


class _MemoryCompanyRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, company_id: str) -> Company | None:
        return self._t.companies.get(company_id)

    def save_totals(self, company_id: str, total: Decimal, owner_count: int) -> None:
        self._t.companies[company_id] = Company(
            company_id=company_id,
            total_ownership_percentage=total,
            owner_count=owner_count,
            updated_at=self._now,
        )


class _MemoryVerificationRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, verification_id: str) -> MasterIDVerification | None:
        return self._t.verifications.get(verification_id)

    def list_by_master_account(self, master_account_id: str) -> list[MasterIDVerification]:
        return [v for v in self._t.verifications.values() if v.master_account_id == master_account_id]

    def add(self, verification: MasterIDVerification) -> None:
        self._t.verifications[verification.id] = replace(verification, submitted_at=self._now)

    def mark_verified(self, verification_id: str, admin_id: str, notes: str) -> None:
        current = self._t.verifications[verification_id]
        self._t.verifications[verification_id] = replace(
            current,
            status=IdVerificationStatus.VERIFIED,
            reviewed_at=self._now,
            reviewed_by=admin_id,
            review_notes=notes,
            verified_at=self._now,
        )

    def mark_rejected(self, verification_id: str, admin_id: str, reason: str) -> None:
        current = self._t.verifications[verification_id]
        self._t.verifications[verification_id] = replace(
            current,
            status=IdVerificationStatus.REJECTED,
            reviewed_at=self._now,
            reviewed_by=admin_id,
            rejection_reason=reason,
        )


class _MemoryFraudDisputeRepo:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def get(self, dispute_id: str) -> FraudDispute | None:
        return self._t.disputes.get(dispute_id)

    def add(self, dispute: FraudDispute) -> None:
        self._t.disputes[dispute.id] = replace(
            dispute,
            reported_at=self._now,
            supporting_documents=tuple(
                SupportingDocument(d.url, d.storage_path, d.file_name, uploaded_at=self._now)
                for d in dispute.supporting_documents
            ),
        )


class _MemoryAuditLogSink:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self._t = tables
        self._now = now

    def append(self, entry: AuditLogEntry) -> None:
        self._t.audit.append(replace(entry, timestamp=self._now))


class InMemoryUnitOfWork:
    def __init__(self, tables: _Tables, now: datetime) -> None:
        self.accounts = _MemoryMasterAccountRepo(tables, now)
        self.ownerships = _MemoryOwnershipRepo(tables, now)
        self.roles = _MemoryRoleRepo(tables, now)
        self.companies = _MemoryCompanyRepo(tables, now)
        self.verifications = _MemoryVerificationRepo(tables, now)
        self.disputes = _MemoryFraudDisputeRepo(tables, now)
        self.audit = _MemoryAuditLogSink(tables, now)


class InMemoryStore:
    def __init__(
        self,
        accounts: Iterable[MasterAccount] = (),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._tables = _Tables()
        self._lock = threading.Lock()
        self._clock = clock
        for account in accounts:
            self.add_master_account(account)

    def add_master_account(self, account: MasterAccount) -> None:
        """Master accounts are created by the host application, not the ledger."""
        with self._lock:
            self._tables.accounts[account.id] = replace(account, created_at=account.created_at or self._clock())

    @property
    def audit_log(self) -> tuple[AuditLogEntry, ...]:
        return tuple(self._tables.audit)

    def run_transaction(self, work: Callable[[InMemoryUnitOfWork], T]) -> T:
        with self._lock:
            working = self._tables.copy()
            result = work(InMemoryUnitOfWork(working, self._clock()))
            self._tables = working
            return result
