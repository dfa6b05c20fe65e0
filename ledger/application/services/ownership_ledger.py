from __future__ import annotations

from collections.abc import Iterable

from ledger.domain.audit.entities import AuditActionType, AuditLogEntry, TargetEntityType, serialize_value
from ledger.domain.errors import LedgerError, LedgerFailure, Result, format_percentage
from ledger.domain.ownership.entities import CompanyOwnership, CompanyRole
from ledger.domain.ownership.enums import CompanyRoleType
from ledger.domain.ownership.services import OwnershipAllocationService
from ledger.domain.ownership.value_objects import OwnershipPercentage, Permissions
from ledger.domain.unit_of_work import Store, UnitOfWork
from ledger.infrastructure.log import get_logger

from .boundary import execute, new_id, query

_logger = get_logger("ownership")


class OwnershipLedger:
    """Imperative shell: one store transaction per operation, allocation rules
    delegated to OwnershipAllocationService (pure core)."""

    def __init__(self, store: Store, allow_multiple_roles: bool = True) -> None:
        self._store = store
        self._allow_multiple_roles = allow_multiple_roles

    # ------------------------------------------------------------------
    # Stakes
    # ------------------------------------------------------------------

    def add_company_owner(
        self,
        company_id: str,
        master_account_id: str,
        master_account_name: str,
        ownership_percentage: object,
        granted_by: str,
        voting_rights: bool = True,
        economic_rights: bool = True,
        notes: str | None = None,
    ) -> Result[str]:
        """Grant a new active stake. Returns the ownership id."""
        try:
            percentage = OwnershipPercentage(ownership_percentage).value
        except ValueError:
            return Result.fail(LedgerError.percentage_out_of_range(ownership_percentage))

        def work(uow: UnitOfWork) -> str:
            account = uow.accounts.get(master_account_id)
            if account is None:
                raise LedgerFailure(LedgerError.not_found("Master account", master_account_id))
            if not account.can_own_companies:
                raise LedgerFailure(LedgerError.not_eligible_to_own(master_account_id))

            stakes = uow.ownerships.list_by_company(company_id)
            violation = OwnershipAllocationService.check_addition(stakes, master_account_id, percentage)
            if violation is not None:
                raise LedgerFailure(violation)

            ownership = CompanyOwnership(
                id=new_id(),
                company_id=company_id,
                master_account_id=master_account_id,
                master_account_name=master_account_name,
                ownership_percentage=percentage,
                granted_by=granted_by,
                approved_by=granted_by,
                voting_rights=voting_rights,
                economic_rights=economic_rights,
                notes=notes,
            )
            uow.ownerships.add(ownership)
            uow.accounts.link_company(master_account_id, company_id)
            uow.companies.save_totals(
                company_id,
                OwnershipAllocationService.active_total(stakes) + percentage,
                OwnershipAllocationService.active_count(stakes) + 1,
            )
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=master_account_id,
                    master_account_name=master_account_name,
                    company_id=company_id,
                    action_type=AuditActionType.COMPANY_OWNERSHIP_ADDED,
                    action_description=f"Added {format_percentage(percentage)}% ownership",
                    performed_by=granted_by,
                    target_entity=ownership.id,
                    target_entity_type=TargetEntityType.OWNERSHIP,
                    new_value=serialize_value({"ownershipPercentage": percentage}),
                )
            )
            return ownership.id

        result = execute(self._store, "add company owner", work, _logger)
        if result.success:
            _logger.info("Owner added to company %s: %s", company_id, result.value)
        return result

    def change_ownership_percentage(
        self,
        ownership_id: str,
        new_percentage: object,
        changed_by: str,
        reason: str,
    ) -> Result[None]:
        # canOwnCompanies is not re-checked: the holder was vetted when the stake was granted.
        try:
            percentage = OwnershipPercentage(new_percentage).value
        except ValueError:
            return Result.fail(LedgerError.percentage_out_of_range(new_percentage))

        def work(uow: UnitOfWork) -> None:
            current = uow.ownerships.get(ownership_id)
            if current is None:
                raise LedgerFailure(LedgerError.not_found("Ownership record", ownership_id))
            if not current.is_active:
                raise LedgerFailure(
                    LedgerError.conflict("Ownership record is not active", ownership_id=ownership_id)
                )

            stakes = uow.ownerships.list_by_company(current.company_id)
            violation = OwnershipAllocationService.check_change(stakes, ownership_id, percentage)
            if violation is not None:
                raise LedgerFailure(violation)

            previous = current.ownership_percentage
            uow.ownerships.update_percentage(ownership_id, percentage)
            uow.companies.save_totals(
                current.company_id,
                OwnershipAllocationService.active_total(stakes, exclude_id=ownership_id) + percentage,
                OwnershipAllocationService.active_count(stakes),
            )
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=current.master_account_id,
                    master_account_name=current.master_account_name,
                    company_id=current.company_id,
                    action_type=AuditActionType.COMPANY_OWNERSHIP_CHANGED,
                    action_description=(
                        f"Changed ownership from {format_percentage(previous)}% "
                        f"to {format_percentage(percentage)}%: {reason}"
                    ),
                    performed_by=changed_by,
                    target_entity=ownership_id,
                    target_entity_type=TargetEntityType.OWNERSHIP,
                    previous_value=serialize_value({"ownershipPercentage": previous}),
                    new_value=serialize_value({"ownershipPercentage": percentage, "reason": reason}),
                )
            )

        return execute(self._store, "change ownership percentage", work, _logger)

    def revoke_company_owner(
        self,
        ownership_id: str,
        revoked_by: str,
        reason: str | None = None,
    ) -> Result[None]:
        """Deactivate a stake. The record stays, with status revoked."""

        def work(uow: UnitOfWork) -> None:
            current = uow.ownerships.get(ownership_id)
            if current is None:
                raise LedgerFailure(LedgerError.not_found("Ownership record", ownership_id))
            if not current.is_active:
                raise LedgerFailure(
                    LedgerError.conflict("Ownership record is already revoked", ownership_id=ownership_id)
                )

            stakes = uow.ownerships.list_by_company(current.company_id)
            uow.ownerships.revoke(ownership_id, revoked_by)
            uow.companies.save_totals(
                current.company_id,
                OwnershipAllocationService.active_total(stakes, exclude_id=ownership_id),
                OwnershipAllocationService.active_count(stakes) - 1,
            )
            description = f"Revoked {format_percentage(current.ownership_percentage)}% ownership"
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=current.master_account_id,
                    master_account_name=current.master_account_name,
                    company_id=current.company_id,
                    action_type=AuditActionType.COMPANY_OWNERSHIP_REVOKED,
                    action_description=f"{description}: {reason}" if reason else description,
                    performed_by=revoked_by,
                    target_entity=ownership_id,
                    target_entity_type=TargetEntityType.OWNERSHIP,
                    previous_value=serialize_value(
                        {"ownershipPercentage": current.ownership_percentage, "status": current.status.value}
                    ),
                    new_value=serialize_value({"status": "revoked"}),
                )
            )

        return execute(self._store, "revoke company owner", work, _logger)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def assign_company_role(
        self,
        company_id: str,
        master_account_id: str,
        master_account_name: str,
        role: CompanyRoleType | str,
        permissions: Iterable[str],
        assigned_by: str,
        custom_role_name: str | None = None,
        notes: str | None = None,
    ) -> Result[str]:
        try:
            role_type = CompanyRoleType(role)
            custom_name = custom_role_name.strip() if custom_role_name and custom_role_name.strip() else None
            candidate = CompanyRole(
                id=new_id(),
                company_id=company_id,
                master_account_id=master_account_id,
                master_account_name=master_account_name,
                role=role_type,
                custom_role_name=custom_name,
                permissions=Permissions(permissions).values,
                assigned_by=assigned_by,
                notes=notes,
            )
        except ValueError as err:
            return Result.fail(LedgerError.invalid_input(str(err), role=str(role)))

        def work(uow: UnitOfWork) -> str:
            if not self._allow_multiple_roles:
                existing = uow.roles.list_by_master_account(master_account_id, company_id)
                if existing:
                    raise LedgerFailure(
                        LedgerError.conflict(
                            "Master account already has an active role in this company",
                            existing_role_id=existing[0].id,
                        )
                    )

            uow.roles.add(candidate)
            label = f"{role_type.value} ({custom_name})" if custom_name else role_type.value
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=master_account_id,
                    master_account_name=master_account_name,
                    company_id=company_id,
                    action_type=AuditActionType.COMPANY_ROLE_ASSIGNED,
                    action_description=f"Assigned role: {label}",
                    performed_by=assigned_by,
                    target_entity=candidate.id,
                    target_entity_type=TargetEntityType.ROLE,
                    new_value=serialize_value({"role": role_type.value, "permissions": list(candidate.permissions)}),
                )
            )
            return candidate.id

        return execute(self._store, "assign role", work, _logger)

    def revoke_company_role(self, role_id: str, revoked_by: str, reason: str | None = None) -> Result[None]:
        def work(uow: UnitOfWork) -> None:
            current = uow.roles.get(role_id)
            if current is None:
                raise LedgerFailure(LedgerError.not_found("Role", role_id))
            if not current.is_active:
                raise LedgerFailure(LedgerError.conflict("Role is already revoked", role_id=role_id))

            uow.roles.revoke(role_id, revoked_by)
            description = f"Revoked role: {current.custom_role_name or current.role.value}"
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=current.master_account_id,
                    master_account_name=current.master_account_name,
                    company_id=current.company_id,
                    action_type=AuditActionType.COMPANY_ROLE_REVOKED,
                    action_description=f"{description}: {reason}" if reason else description,
                    performed_by=revoked_by,
                    target_entity=role_id,
                    target_entity_type=TargetEntityType.ROLE,
                    previous_value=serialize_value({"role": current.role.value, "status": current.status.value}),
                    new_value=serialize_value({"status": "revoked"}),
                )
            )

        return execute(self._store, "revoke role", work, _logger)

    # ------------------------------------------------------------------
    # Queries. The invariant is enforced on write only.
    # ------------------------------------------------------------------

    def get_company_owners(self, company_id: str, include_inactive: bool = False) -> list[CompanyOwnership]:
        return query(
            self._store,
            "get company owners",
            lambda uow: uow.ownerships.list_by_company(company_id, include_inactive),
            _logger,
        )

    def get_master_account_ownerships(
        self,
        master_account_id: str,
        include_inactive: bool = False,
    ) -> list[CompanyOwnership]:
        return query(
            self._store,
            "get master account ownerships",
            lambda uow: uow.ownerships.list_by_master_account(master_account_id, include_inactive),
            _logger,
        )

    def get_master_account_roles(self, master_account_id: str, company_id: str | None = None) -> list[CompanyRole]:
        return query(
            self._store,
            "get master account roles",
            lambda uow: uow.roles.list_by_master_account(master_account_id, company_id),
            _logger,
        )
