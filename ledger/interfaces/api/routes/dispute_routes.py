# ledger/interfaces/api/routes/dispute_routes.py
from fastapi import APIRouter, Depends

from ledger.application.dtos.result_dto import OperationResultDTO
from ledger.application.dtos.verification_dto import FraudDisputeRequest
from ledger.application.services.id_verification import IdVerificationService
from ledger.interfaces.api.dependencies import get_verification_service
from ledger.interfaces.api.errors import unwrap

router = APIRouter()


@router.post("/fraud-disputes", response_model=OperationResultDTO, status_code=201)
def report_fraud_dispute(
    body: FraudDisputeRequest,
    service: IdVerificationService = Depends(get_verification_service),  # noqa: B008
) -> OperationResultDTO:
    dispute_id = unwrap(
        service.report_fraud_dispute(
            national_id_number=body.national_id_number,
            reported_by=body.reported_by,
            reported_by_name=body.reported_by_name,
            explanation=body.explanation,
            reported_by_email=body.reported_by_email,
            supporting_documents=[d.to_domain() for d in body.supporting_documents],
        )
    )
    return OperationResultDTO(success=True, id=dispute_id)  # type: ignore[arg-type]
