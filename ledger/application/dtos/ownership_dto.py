# ledger/application/dtos/ownership_dto.py
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from ledger.domain.errors import format_percentage
from ledger.domain.ownership.entities import CompanyOwnership, CompanyRole


def _iso(value: object) -> str | None:
    return value.isoformat() if value is not None else None  # type: ignore[attr-defined]


class OwnershipDTO(BaseModel):
    id: str
    company_id: str
    master_account_id: str
    master_account_name: str
    ownership_percentage: str
    status: str
    voting_rights: bool
    economic_rights: bool
    granted_by: str
    granted_at: str | None
    approved_by: str | None
    notes: str | None
    revoked_at: str | None = None
    revoked_by: str | None = None

    @classmethod
    def from_domain(cls, ownership: CompanyOwnership) -> OwnershipDTO:
        return cls(
            id=ownership.id,
            company_id=ownership.company_id,
            master_account_id=ownership.master_account_id,
            master_account_name=ownership.master_account_name,
            ownership_percentage=format_percentage(ownership.ownership_percentage),
            status=ownership.status.value,
            voting_rights=ownership.voting_rights,
            economic_rights=ownership.economic_rights,
            granted_by=ownership.granted_by,
            granted_at=_iso(ownership.granted_at),
            approved_by=ownership.approved_by,
            notes=ownership.notes,
            revoked_at=_iso(ownership.revoked_at),
            revoked_by=ownership.revoked_by,
        )


class RoleDTO(BaseModel):
    id: str
    company_id: str
    master_account_id: str
    master_account_name: str
    role: str
    custom_role_name: str | None
    permissions: list[str]
    status: str
    assigned_by: str
    assigned_at: str | None
    notes: str | None

    @classmethod
    def from_domain(cls, role: CompanyRole) -> RoleDTO:
        return cls(
            id=role.id,
            company_id=role.company_id,
            master_account_id=role.master_account_id,
            master_account_name=role.master_account_name,
            role=role.role.value,
            custom_role_name=role.custom_role_name,
            permissions=list(role.permissions),
            status=role.status.value,
            assigned_by=role.assigned_by,
            assigned_at=_iso(role.assigned_at),
            notes=role.notes,
        )


class AddOwnerRequest(BaseModel):
    master_account_id: str = Field(min_length=1)
    master_account_name: str = Field(min_length=1)
    ownership_percentage: Decimal
    granted_by: str = Field(min_length=1)
    voting_rights: bool = True
    economic_rights: bool = True
    notes: str | None = None


class ChangePercentageRequest(BaseModel):
    new_percentage: Decimal
    changed_by: str = Field(min_length=1)
    reason: str = ""


class RevokeRequest(BaseModel):
    revoked_by: str = Field(min_length=1)
    reason: str | None = None


class AssignRoleRequest(BaseModel):
    master_account_id: str = Field(min_length=1)
    master_account_name: str = Field(min_length=1)
    role: str
    permissions: list[str] = Field(default_factory=list)
    assigned_by: str = Field(min_length=1)
    custom_role_name: str | None = None
    notes: str | None = None
