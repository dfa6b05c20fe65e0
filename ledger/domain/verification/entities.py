from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .enums import (
    DisputePriority,
    DisputeStatus,
    DisputeType,
    DocumentType,
    DuplicateIdStatus,
    IdVerificationStatus,
)


@dataclass(frozen=True)
class MasterAccount:
    """Tenant-level identity. Owned by the surrounding application; the core
    only mutates the verification, capability and company-link fields."""
    id: str
    name: str
    national_id_number: str | None = None
    can_own_companies: bool = False
    can_receive_payouts: bool = False
    can_approve_ownership_changes: bool = False
    id_verification_status: IdVerificationStatus = IdVerificationStatus.NOT_SUBMITTED
    duplicate_id_status: DuplicateIdStatus = DuplicateIdStatus.NONE
    id_document_url: str | None = None
    id_verified_at: datetime | None = None
    id_verified_by: str | None = None
    restriction_reason: str | None = None
    company_ids: tuple[str, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class DocumentMetadata:
    file_name: str | None = None
    file_size: int | None = None
    mime_type: str | None = None


@dataclass(frozen=True)
class MasterIDVerification:
    """One identity-document submission. PENDING_REVIEW -> VERIFIED | REJECTED."""
    id: str
    master_account_id: str
    national_id_number: str
    document_type: DocumentType
    document_url: str
    storage_path: str
    status: IdVerificationStatus = IdVerificationStatus.PENDING_REVIEW
    metadata: DocumentMetadata | None = None
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    review_notes: str | None = None
    rejection_reason: str | None = None
    verified_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (IdVerificationStatus.VERIFIED, IdVerificationStatus.REJECTED)


@dataclass(frozen=True)
class SupportingDocument:
    url: str
    storage_path: str
    file_name: str
    uploaded_at: datetime | None = None


@dataclass(frozen=True)
class FraudDispute:
    """Suspected duplicate-identity report. Resolution happens outside this core."""
    id: str
    national_id_number: str
    reported_by: str
    reported_by_name: str
    existing_account_id: str
    existing_account_name: str
    new_account_id: str
    new_account_name: str
    explanation: str
    reported_by_email: str | None = None
    status: DisputeStatus = DisputeStatus.PENDING
    priority: DisputePriority = DisputePriority.HIGH
    dispute_type: DisputeType = DisputeType.DUPLICATE_ID
    supporting_documents: tuple[SupportingDocument, ...] = ()
    reported_at: datetime | None = None


@dataclass(frozen=True)
class NationalIdLookup:
    exists: bool
    master_account_id: str | None = None
    master_account_name: str | None = None
