# ledger/interfaces/api/routes/ownership_routes.py
from fastapi import APIRouter, Depends, Query

from ledger.application.dtos.ownership_dto import (
    AddOwnerRequest,
    ChangePercentageRequest,
    OwnershipDTO,
    RevokeRequest,
)
from ledger.application.dtos.result_dto import OperationResultDTO
from ledger.application.services.ownership_ledger import OwnershipLedger
from ledger.interfaces.api.dependencies import get_ownership_ledger
from ledger.interfaces.api.errors import unwrap

router = APIRouter()


@router.post("/companies/{company_id}/owners", response_model=OperationResultDTO, status_code=201)
def add_company_owner(
    company_id: str,
    body: AddOwnerRequest,
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> OperationResultDTO:
    ownership_id = unwrap(
        ledger.add_company_owner(
            company_id=company_id,
            master_account_id=body.master_account_id,
            master_account_name=body.master_account_name,
            ownership_percentage=body.ownership_percentage,
            granted_by=body.granted_by,
            voting_rights=body.voting_rights,
            economic_rights=body.economic_rights,
            notes=body.notes,
        )
    )
    return OperationResultDTO(success=True, id=ownership_id)  # type: ignore[arg-type]


@router.get("/companies/{company_id}/owners", response_model=list[OwnershipDTO])
def get_company_owners(
    company_id: str,
    include_inactive: bool = Query(default=False),
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> list[OwnershipDTO]:
    return [OwnershipDTO.from_domain(o) for o in ledger.get_company_owners(company_id, include_inactive)]


@router.patch("/ownerships/{ownership_id}", response_model=OperationResultDTO)
def change_ownership_percentage(
    ownership_id: str,
    body: ChangePercentageRequest,
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> OperationResultDTO:
    unwrap(ledger.change_ownership_percentage(ownership_id, body.new_percentage, body.changed_by, body.reason))
    return OperationResultDTO(success=True, id=ownership_id)


@router.post("/ownerships/{ownership_id}/revoke", response_model=OperationResultDTO)
def revoke_company_owner(
    ownership_id: str,
    body: RevokeRequest,
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> OperationResultDTO:
    unwrap(ledger.revoke_company_owner(ownership_id, body.revoked_by, body.reason))
    return OperationResultDTO(success=True, id=ownership_id)


@router.get("/master-accounts/{master_account_id}/ownerships", response_model=list[OwnershipDTO])
def get_master_account_ownerships(
    master_account_id: str,
    include_inactive: bool = Query(default=False),
    ledger: OwnershipLedger = Depends(get_ownership_ledger),  # noqa: B008
) -> list[OwnershipDTO]:
    stakes = ledger.get_master_account_ownerships(master_account_id, include_inactive)
    return [OwnershipDTO.from_domain(o) for o in stakes]
