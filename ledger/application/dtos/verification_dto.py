# ledger/application/dtos/verification_dto.py
from __future__ import annotations

from pydantic import BaseModel, Field

from ledger.domain.verification.entities import DocumentMetadata, NationalIdLookup, SupportingDocument


class NationalIdLookupRequest(BaseModel):
    national_id_number: str


class NationalIdLookupDTO(BaseModel):
    exists: bool
    master_account_id: str | None = None
    master_account_name: str | None = None

    @classmethod
    def from_domain(cls, lookup: NationalIdLookup) -> NationalIdLookupDTO:
        return cls(
            exists=lookup.exists,
            master_account_id=lookup.master_account_id,
            master_account_name=lookup.master_account_name,
        )


class DocumentMetadataDTO(BaseModel):
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None

    def to_domain(self) -> DocumentMetadata:
        return DocumentMetadata(file_name=self.file_name, file_size=self.file_size, mime_type=self.mime_type)


class SubmitVerificationRequest(BaseModel):
    master_account_id: str = Field(min_length=1)
    national_id_number: str
    document_type: str
    document_url: str
    storage_path: str
    metadata: DocumentMetadataDTO | None = None


class ApproveVerificationRequest(BaseModel):
    admin_id: str = Field(min_length=1)
    notes: str | None = None


class RejectVerificationRequest(BaseModel):
    admin_id: str = Field(min_length=1)
    reason: str


class SupportingDocumentDTO(BaseModel):
    url: str = Field(min_length=1)
    storage_path: str = Field(min_length=1)
    file_name: str = Field(min_length=1)

    def to_domain(self) -> SupportingDocument:
        return SupportingDocument(url=self.url, storage_path=self.storage_path, file_name=self.file_name)


class FraudDisputeRequest(BaseModel):
    national_id_number: str
    reported_by: str = Field(min_length=1)
    reported_by_name: str = Field(min_length=1)
    explanation: str
    reported_by_email: str | None = None
    supporting_documents: list[SupportingDocumentDTO] = Field(default_factory=list)
