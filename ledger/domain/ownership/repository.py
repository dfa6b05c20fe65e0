from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from .entities import Company, CompanyOwnership, CompanyRole


class OwnershipRepository(Protocol):
    def get(self, ownership_id: str) -> CompanyOwnership | None: ...

    def list_by_company(
        self,
        company_id: str,
        include_inactive: bool = False,
    ) -> list[CompanyOwnership]: ...

    def list_by_master_account(
        self,
        master_account_id: str,
        include_inactive: bool = False,
    ) -> list[CompanyOwnership]: ...

    def add(self, ownership: CompanyOwnership) -> None: ...

    def update_percentage(self, ownership_id: str, percentage: Decimal) -> None: ...

    def revoke(self, ownership_id: str, revoked_by: str) -> None: ...


class RoleRepository(Protocol):
    def get(self, role_id: str) -> CompanyRole | None: ...

    def list_by_master_account(
        self,
        master_account_id: str,
        company_id: str | None = None,
        include_inactive: bool = False,
    ) -> list[CompanyRole]: ...

    def add(self, role: CompanyRole) -> None: ...

    def revoke(self, role_id: str, revoked_by: str) -> None: ...


class CompanyRepository(Protocol):
    def get(self, company_id: str) -> Company | None: ...

    def save_totals(self, company_id: str, total: Decimal, owner_count: int) -> None:
        """Upsert the denormalised counters. Must touch the company row so that
        two concurrent ledger transactions on one company conflict."""
        ...
