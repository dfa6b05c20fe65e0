# ledger/application/dtos/result_dto.py
from pydantic import BaseModel


class OperationResultDTO(BaseModel):
    success: bool
    id: str | None = None
