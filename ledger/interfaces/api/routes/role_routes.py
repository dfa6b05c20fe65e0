# ledger/interfaces/api/routes/role_routes.py
from fastapi import APIRouter, Depends, Query

from ledger.application.dtos.ownership_dto import AssignRoleRequest, RevokeRequest, RoleDTO
from ledger.application.dtos.result_dto import OperationResultDTO
from ledger.application.services.ownership_ledger import OwnershipLedger
from ledger.interfaces.api.dependencies import get_ownership_ledger
from ledger.interfaces.api.errors import unwrap

router = APIRouter()


@router.post("/companies/{company_id}/roles", response_model=OperationResultDTO, status_code=201)
def assign_company_role(
    company_id: str,
    body: AssignRoleRequest,
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> OperationResultDTO:
    role_id = unwrap(
        ledger.assign_company_role(
            company_id=company_id,
            master_account_id=body.master_account_id,
            master_account_name=body.master_account_name,
            role=body.role,
            permissions=body.permissions,
            assigned_by=body.assigned_by,
            custom_role_name=body.custom_role_name,
            notes=body.notes,
        )
    )
    return OperationResultDTO(success=True, id=role_id)  # type: ignore[arg-type]


@router.get("/master-accounts/{master_account_id}/roles", response_model=list[RoleDTO])
def get_master_account_roles(
    master_account_id: str,
    company_id: str | None = Query(default=None),
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> list[RoleDTO]:
    return [RoleDTO.from_domain(r) for r in ledger.get_master_account_roles(master_account_id, company_id)]


@router.post("/roles/{role_id}/revoke", response_model=OperationResultDTO)
def revoke_company_role(
    role_id: str,
    body: RevokeRequest,
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> OperationResultDTO:
    unwrap(ledger.revoke_company_role(role_id, body.revoked_by, body.reason))
    return OperationResultDTO(success=True, id=role_id)
