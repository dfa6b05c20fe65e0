from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .enums import CompanyRoleType, OwnershipStatus, RoleStatus


@dataclass(frozen=True)
class CompanyOwnership:
    """One master account's stake in one company. Never deleted, only revoked."""
    id: str
    company_id: str
    master_account_id: str
    master_account_name: str
    ownership_percentage: Decimal
    granted_by: str
    status: OwnershipStatus = OwnershipStatus.ACTIVE
    voting_rights: bool = True
    economic_rights: bool = True
    notes: str | None = None
    # Store-clock timestamps: None until the record has been persisted.
    granted_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    revoked_at: datetime | None = None
    revoked_by: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == OwnershipStatus.ACTIVE


@dataclass(frozen=True)
class CompanyRole:
    """Named permission grant. custom_role_name is set iff role is Custom."""
    id: str
    company_id: str
    master_account_id: str
    master_account_name: str
    role: CompanyRoleType
    permissions: tuple[str, ...]
    assigned_by: str
    custom_role_name: str | None = None
    status: RoleStatus = RoleStatus.ACTIVE
    notes: str | None = None
    assigned_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    revoked_at: datetime | None = None
    revoked_by: str | None = None

    def __post_init__(self) -> None:
        if self.role == CompanyRoleType.CUSTOM and not (self.custom_role_name or "").strip():
            raise ValueError("Custom roles require a custom role name")
        if self.role != CompanyRoleType.CUSTOM and self.custom_role_name is not None:
            raise ValueError("Custom role name is only allowed for Custom roles")

    @property
    def is_active(self) -> bool:
        return self.status == RoleStatus.ACTIVE


@dataclass(frozen=True)
class Company:
    """Denormalised counters derived from the active stakes of a company."""
    company_id: str
    total_ownership_percentage: Decimal = Decimal("0")
    owner_count: int = 0
    updated_at: datetime | None = None
