# ledger/interfaces/api/routes/verification_routes.py
from fastapi import APIRouter, Depends, HTTPException

from ledger.application.dtos.result_dto import OperationResultDTO
from ledger.application.dtos.verification_dto import (
    ApproveVerificationRequest,
    NationalIdLookupDTO,
    NationalIdLookupRequest,
    RejectVerificationRequest,
    SubmitVerificationRequest,
)
from ledger.application.services.id_verification import IdVerificationService
from ledger.domain.errors import StoreError
from ledger.interfaces.api.dependencies import get_verification_service
from ledger.interfaces.api.errors import unwrap

router = APIRouter()


# The number travels in the body, never in the URL.
@router.post("/national-ids/lookup", response_model=NationalIdLookupDTO)
def check_national_id_exists(
    body: NationalIdLookupRequest,
    service: IdVerificationService = Depends(get_verification_service),  # noqa: B008
) -> NationalIdLookupDTO:
    try:
        lookup = service.check_national_id_exists(body.national_id_number)
    except StoreError as err:
        raise HTTPException(status_code=503, detail="National ID lookup unavailable") from err
    return NationalIdLookupDTO.from_domain(lookup)


@router.post("/verifications", response_model=OperationResultDTO, status_code=201)
def submit_id_verification(
    body: SubmitVerificationRequest,
    service: IdVerificationService = Depends(get_verification_service),  # noqa: B008
) -> OperationResultDTO:
    verification_id = unwrap(
        service.submit_id_verification(
            master_account_id=body.master_account_id,
            national_id_number=body.national_id_number,
            document_type=body.document_type,
            document_url=body.document_url,
            storage_path=body.storage_path,
            metadata=body.metadata.to_domain() if body.metadata else None,
        )
    )
    return OperationResultDTO(success=True, id=verification_id)  # type: ignore[arg-type]


@router.post("/verifications/{verification_id}/approve", response_model=OperationResultDTO)
def approve_id_verification(
    verification_id: str,
    body: ApproveVerificationRequest,
    service: IdVerificationService = Depends(get_verification_service),  # noqa: B008
) -> OperationResultDTO:
    unwrap(service.approve_id_verification(verification_id, body.admin_id, body.notes))
    return OperationResultDTO(success=True, id=verification_id)


@router.post("/verifications/{verification_id}/reject", response_model=OperationResultDTO)
def reject_id_verification(
    verification_id: str,
    body: RejectVerificationRequest,
    service: IdVerificationService = Depends(get_verification_service),  # noqa: B008
) -> OperationResultDTO:
    unwrap(service.reject_id_verification(verification_id, body.admin_id, body.reason))
    return OperationResultDTO(success=True, id=verification_id)
