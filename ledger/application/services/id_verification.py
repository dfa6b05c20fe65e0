# ledger/application/services/id_verification.py
#
# National-ID verification and duplicate-identity workflow.
#
# Design decisions:
#   - Duplicate policy is "flag and block": when the oldest holder of the
#     submitted number is another account, the submitter is marked
#     DUPLICATE_DETECTED (and the number is stored on it so a later dispute
#     can find both holders), no verification record is created, and the
#     call fails. The flag must survive the failure, so that path commits
#     and returns the error as a value instead of raising inside the
#     transaction.
#   - Review is a one-way state machine: only PENDING_REVIEW can be approved
#     or rejected. A rejected applicant may submit again (a new record); an
#     applicant with a pending or verified submission may not.
#   - Numbers are normalised through NationalIdNumber before any lookup and
#     only ever logged masked.
#
# Invariants:
#   - Approval grants can_own_companies, can_receive_payouts and
#     can_approve_ownership_changes in the same transaction that marks the
#     verification VERIFIED.
#   - Rejection never revokes capabilities.
from __future__ import annotations

from collections.abc import Iterable

from ledger.domain.audit.entities import AuditActionType, AuditLogEntry, TargetEntityType, serialize_value
from ledger.domain.errors import ErrorKind, LedgerError, LedgerFailure, Result
from ledger.domain.unit_of_work import Store, UnitOfWork
from ledger.domain.verification.entities import (
    DocumentMetadata,
    FraudDispute,
    MasterIDVerification,
    NationalIdLookup,
    SupportingDocument,
)
from ledger.domain.verification.enums import DocumentType, IdVerificationStatus
from ledger.domain.verification.value_objects import NationalIdNumber
from ledger.infrastructure.log import get_logger

from .boundary import execute, new_id

_logger = get_logger("verification")

DEFAULT_APPROVAL_NOTES = "ID verified successfully"
UNKNOWN_ACCOUNT_NAME = "Unknown"


def _require_text(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{field_name} is required")
    return text


class IdVerificationService:
    def __init__(self, store: Store) -> None:
        self._store = store

    def check_national_id_exists(self, national_id_number: str) -> NationalIdLookup:
        """Any account holding the number counts, whatever its verification state.

        Store failures propagate: a failed lookup must not read as "free".
        """
        try:
            number = NationalIdNumber(national_id_number)
        except ValueError:
            return NationalIdLookup(exists=False)

        holders = self._store.run_transaction(lambda uow: uow.accounts.find_by_national_id(number.value))
        if not holders:
            return NationalIdLookup(exists=False)
        first = holders[0]
        return NationalIdLookup(
            exists=True,
            master_account_id=first.id,
            master_account_name=first.name or UNKNOWN_ACCOUNT_NAME,
        )

    def submit_id_verification(
        self,
        master_account_id: str,
        national_id_number: str,
        document_type: DocumentType | str,
        document_url: str,
        storage_path: str,
        metadata: DocumentMetadata | None = None,
    ) -> Result[str]:
        try:
            number = NationalIdNumber(national_id_number)
            doc_type = DocumentType(document_type)
            url = _require_text(document_url, "Document URL")
            path = _require_text(storage_path, "Storage path")
        except ValueError as err:
            return Result.fail(LedgerError.invalid_input(str(err)))

        def work(uow: UnitOfWork) -> str | LedgerError:
            account = uow.accounts.get(master_account_id)
            if account is None:
                raise LedgerFailure(LedgerError.not_found("Master account", master_account_id))

            holders = uow.accounts.find_by_national_id(number.value)
            conflicting = holders[0] if holders and holders[0].id != master_account_id else None
            if conflicting is not None:
                uow.accounts.flag_duplicate_id(master_account_id, number.value)
                return LedgerError.duplicate_national_id(
                    conflicting.id, conflicting.name or UNKNOWN_ACCOUNT_NAME
                )

            if account.id_verification_status == IdVerificationStatus.VERIFIED:
                raise LedgerFailure(
                    LedgerError.conflict("Master account ID is already verified", master_account_id=master_account_id)
                )
            if any(
                v.status == IdVerificationStatus.PENDING_REVIEW
                for v in uow.verifications.list_by_master_account(master_account_id)
            ):
                raise LedgerFailure(
                    LedgerError.conflict(
                        "An ID verification is already pending review", master_account_id=master_account_id
                    )
                )

            verification = MasterIDVerification(
                id=new_id(),
                master_account_id=master_account_id,
                national_id_number=number.value,
                document_type=doc_type,
                document_url=url,
                storage_path=path,
                metadata=metadata,
            )
            uow.verifications.add(verification)
            uow.accounts.mark_verification_pending(master_account_id, number.value, url)
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=master_account_id,
                    master_account_name=account.name,
                    action_type=AuditActionType.ID_VERIFICATION_SUBMITTED,
                    action_description=f"National ID verification submitted ({doc_type.value})",
                    performed_by=master_account_id,
                    target_entity=verification.id,
                    target_entity_type=TargetEntityType.MASTER_ACCOUNT,
                    previous_value=serialize_value({"idVerificationStatus": account.id_verification_status.value}),
                    new_value=serialize_value({"idVerificationStatus": IdVerificationStatus.PENDING_REVIEW.value}),
                )
            )
            return verification.id

        outcome = execute(self._store, "submit ID verification", work, _logger)
        if isinstance(outcome.value, LedgerError):
            _logger.warning(
                "Duplicate national ID %s submitted by %s (held by %s)",
                number.masked,
                master_account_id,
                outcome.value.context.get("existing_account_id"),
            )
            return Result.fail(outcome.value)
        if outcome.success:
            _logger.info("ID verification submitted: %s", outcome.value)
            return Result.ok(outcome.value)
        return Result.fail(outcome.error)  # type: ignore[arg-type]

    def approve_id_verification(
        self,
        verification_id: str,
        admin_id: str,
        notes: str | None = None,
    ) -> Result[None]:
        def work(uow: UnitOfWork) -> None:
            verification, account_name, previous_status = self._load_pending(uow, verification_id)
            uow.verifications.mark_verified(verification_id, admin_id, notes or DEFAULT_APPROVAL_NOTES)
            uow.accounts.mark_verified(verification.master_account_id, admin_id)
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=verification.master_account_id,
                    master_account_name=account_name,
                    action_type=AuditActionType.ID_VERIFICATION_APPROVED,
                    action_description="National ID verification approved",
                    performed_by=admin_id,
                    target_entity=verification_id,
                    target_entity_type=TargetEntityType.MASTER_ACCOUNT,
                    previous_value=serialize_value({"idVerificationStatus": previous_status}),
                    new_value=serialize_value(
                        {
                            "idVerificationStatus": IdVerificationStatus.VERIFIED.value,
                            "canOwnCompanies": True,
                            "canReceivePayouts": True,
                            "canApproveOwnershipChanges": True,
                        }
                    ),
                )
            )

        return execute(self._store, "approve ID verification", work, _logger)

    def reject_id_verification(self, verification_id: str, admin_id: str, reason: str) -> Result[None]:
        try:
            reason_text = _require_text(reason, "Rejection reason")
        except ValueError as err:
            return Result.fail(LedgerError.invalid_input(str(err)))

        def work(uow: UnitOfWork) -> None:
            verification, account_name, previous_status = self._load_pending(uow, verification_id)
            uow.verifications.mark_rejected(verification_id, admin_id, reason_text)
            uow.accounts.mark_rejected(verification.master_account_id, reason_text)
            uow.audit.append(
                AuditLogEntry(
                    id=new_id(),
                    master_account_id=verification.master_account_id,
                    master_account_name=account_name,
                    action_type=AuditActionType.ID_VERIFICATION_REJECTED,
                    action_description=f"National ID verification rejected: {reason_text}",
                    performed_by=admin_id,
                    target_entity=verification_id,
                    target_entity_type=TargetEntityType.MASTER_ACCOUNT,
                    previous_value=serialize_value({"idVerificationStatus": previous_status}),
                    new_value=serialize_value(
                        {"idVerificationStatus": IdVerificationStatus.REJECTED.value, "reason": reason_text}
                    ),
                )
            )

        return execute(self._store, "reject ID verification", work, _logger)

    def report_fraud_dispute(
        self,
        national_id_number: str,
        reported_by: str,
        reported_by_name: str,
        explanation: str,
        reported_by_email: str | None = None,
        supporting_documents: Iterable[SupportingDocument] | None = None,
    ) -> Result[str]:
        try:
            number = NationalIdNumber(national_id_number)
            explanation_text = _require_text(explanation, "Explanation")
        except ValueError as err:
            return Result.fail(LedgerError.invalid_input(str(err)))
        documents = tuple(supporting_documents or ())

        def work(uow: UnitOfWork) -> str:
            holders = uow.accounts.find_by_national_id(number.value)
            if not holders:
                raise LedgerFailure(
                    LedgerError(ErrorKind.NOT_FOUND, "No account found with this national ID number")
                )
            existing = holders[0]
            newcomer = next((a for a in holders if a.id != existing.id), None)

            dispute = FraudDispute(
                id=new_id(),
                national_id_number=number.value,
                reported_by=reported_by,
                reported_by_name=reported_by_name,
                reported_by_email=reported_by_email,
                existing_account_id=existing.id,
                existing_account_name=existing.name or UNKNOWN_ACCOUNT_NAME,
                new_account_id=newcomer.id if newcomer else reported_by,
                new_account_name=(newcomer.name if newcomer else None) or reported_by_name,
                explanation=explanation_text,
                supporting_documents=documents,
            )
            uow.disputes.add(dispute)
            return dispute.id

        result = execute(self._store, "report fraud dispute", work, _logger)
        if result.success:
            _logger.warning("Fraud dispute %s filed for national ID %s", result.value, number.masked)
        return result

    @staticmethod
    def _load_pending(uow: UnitOfWork, verification_id: str) -> tuple[MasterIDVerification, str, str]:
        verification = uow.verifications.get(verification_id)
        if verification is None:
            raise LedgerFailure(LedgerError.not_found("Verification", verification_id))
        if verification.status != IdVerificationStatus.PENDING_REVIEW:
            raise LedgerFailure(
                LedgerError.conflict(
                    f"Verification already {verification.status.value}",
                    verification_id=verification_id,
                    status=verification.status.value,
                )
            )
        account = uow.accounts.get(verification.master_account_id)
        if account is None:
            raise LedgerFailure(LedgerError.not_found("Master account", verification.master_account_id))
        return verification, account.name, account.id_verification_status.value
