# tests/application/test_id_verification.py
import logging
from datetime import datetime

import pytest

from ledger.domain.audit.entities import AuditActionType
from ledger.domain.errors import ErrorKind
from ledger.domain.verification.entities import DocumentMetadata, MasterAccount, SupportingDocument
from ledger.domain.verification.enums import (
    DisputePriority,
    DisputeStatus,
    DuplicateIdStatus,
    IdVerificationStatus,
)

HOLDER_ID = "8001015009087"


@pytest.fixture()
def holder(store):
    """An account already holding HOLDER_ID, created before anyone else."""
    store.add_master_account(
        MasterAccount(id="h", name="Helen", national_id_number=HOLDER_ID, created_at=datetime(2024, 1, 1))
    )
    return "h"


def _submit(service, account_id, number=HOLDER_ID, **kwargs):
    return service.submit_id_verification(
        account_id,
        number,
        kwargs.pop("document_type", "national_id"),
        kwargs.pop("document_url", "https://files.example/id.png"),
        kwargs.pop("storage_path", "ids/id.png"),
        **kwargs,
    )


def test_lookup_free_number(verification):
    """A number nobody holds reads as free."""
    assert verification.check_national_id_exists(HOLDER_ID).exists is False


def test_lookup_invalid_number_reads_as_free(verification):
    """Unparseable input reads as free instead of failing."""
    assert verification.check_national_id_exists("##").exists is False


def test_lookup_normalises_separators(verification, holder):
    """Separators in the query are ignored."""
    lookup = verification.check_national_id_exists("8001 0150-09087")
    assert lookup.exists
    assert lookup.master_account_id == "h"
    assert lookup.master_account_name == "Helen"


def test_submit_creates_pending_verification(verification, store, account_of):
    """Submission stores a PENDING_REVIEW record and updates the account."""
    result = _submit(
        verification,
        "u",
        metadata=DocumentMetadata(file_name="id.png", file_size=2048, mime_type="image/png"),
    )

    assert result.success
    record = store.run_transaction(lambda uow: uow.verifications.get(result.value))
    assert record.status == IdVerificationStatus.PENDING_REVIEW
    assert record.national_id_number == HOLDER_ID
    assert record.metadata.file_size == 2048
    assert record.submitted_at is not None

    account = account_of("u")
    assert account.id_verification_status == IdVerificationStatus.PENDING_REVIEW
    assert account.national_id_number == HOLDER_ID
    assert account.id_document_url == "https://files.example/id.png"
    assert account.can_own_companies is False
    assert store.audit_log[-1].action_type == AuditActionType.ID_VERIFICATION_SUBMITTED


def test_submit_validation(verification, store):
    """Invalid number, document type, URL or path fail as VALIDATION."""
    assert _submit(verification, "u", number="##").error.kind == ErrorKind.VALIDATION
    assert _submit(verification, "u", document_type="selfie").error.kind == ErrorKind.VALIDATION
    assert _submit(verification, "u", document_url="  ").error.kind == ErrorKind.VALIDATION
    assert _submit(verification, "u", storage_path="").error.kind == ErrorKind.VALIDATION
    assert store.audit_log == ()


def test_submit_unknown_account(verification):
    """Submitting for a missing account is NOT_FOUND."""
    assert _submit(verification, "ghost").error.kind == ErrorKind.NOT_FOUND


def test_duplicate_number_is_flagged_and_blocked(verification, store, holder, account_of):
    """A number held by another account flags the submitter and fails."""
    result = _submit(verification, "u", number="8001-0150-0908-7")

    assert result.error.kind == ErrorKind.CONFLICT
    assert "already registered to Helen" in result.error.message
    assert result.error.context["existing_account_id"] == "h"

    flagged = account_of("u")
    assert flagged.duplicate_id_status == DuplicateIdStatus.DUPLICATE_DETECTED
    assert flagged.id_verification_status == IdVerificationStatus.NOT_SUBMITTED
    assert store.run_transaction(lambda uow: uow.verifications.list_by_master_account("u")) == []
    assert store.audit_log == ()


def test_duplicate_log_line_masks_number(verification, holder, caplog):
    """The duplicate warning only logs the masked number."""
    with caplog.at_level(logging.WARNING, logger="ledger"):
        _submit(verification, "u")
    assert HOLDER_ID not in caplog.text
    assert "9087" in caplog.text


def test_holder_may_submit_own_number(verification, holder):
    """The account holding the number may submit it."""
    assert _submit(verification, "h").success


def test_holder_may_submit_after_impostor_was_flagged(verification, store, holder, account_of):
    """A flagged newer account does not block the oldest holder."""
    assert _submit(verification, "u").error.kind == ErrorKind.CONFLICT
    assert account_of("u").national_id_number == HOLDER_ID

    result = _submit(verification, "h")

    assert result.success
    assert account_of("h").id_verification_status == IdVerificationStatus.PENDING_REVIEW
    assert account_of("u").duplicate_id_status == DuplicateIdStatus.DUPLICATE_DETECTED


def test_short_number_duplicate_is_detected(verification, store, account_of):
    """Short numbers are real numbers: held ones are found and block others."""
    store.add_master_account(
        MasterAccount(id="s", name="Sam", national_id_number="123", created_at=datetime(2024, 1, 1))
    )

    lookup = verification.check_national_id_exists("123")
    assert lookup.exists
    assert lookup.master_account_id == "s"

    result = _submit(verification, "u", number="123")
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.context["existing_account_id"] == "s"
    assert account_of("u").duplicate_id_status == DuplicateIdStatus.DUPLICATE_DETECTED


def test_formatted_stored_number_still_matches(verification, store, account_of):
    """A number stored with separators matches its plain form."""
    store.add_master_account(
        MasterAccount(id="f", name="Frank", national_id_number="8001-0150", created_at=datetime(2024, 1, 1))
    )

    lookup = verification.check_national_id_exists("80010150")
    assert lookup.exists
    assert lookup.master_account_id == "f"

    result = _submit(verification, "u", number="80010150")
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.context["existing_account_id"] == "f"
    assert account_of("u").duplicate_id_status == DuplicateIdStatus.DUPLICATE_DETECTED


def test_pending_submission_blocks_resubmission(verification):
    """A pending submission blocks a second one."""
    assert _submit(verification, "u").success
    again = _submit(verification, "u")
    assert again.error.kind == ErrorKind.CONFLICT


def test_approve_grants_capabilities(verification, store, account_of):
    """Approval marks VERIFIED and grants all three capabilities."""
    verification_id = _submit(verification, "u").value

    assert verification.approve_id_verification(verification_id, "admin").success

    record = store.run_transaction(lambda uow: uow.verifications.get(verification_id))
    assert record.status == IdVerificationStatus.VERIFIED
    assert record.reviewed_by == "admin"
    assert record.review_notes == "ID verified successfully"
    assert record.verified_at is not None

    account = account_of("u")
    assert account.id_verification_status == IdVerificationStatus.VERIFIED
    assert account.can_own_companies
    assert account.can_receive_payouts
    assert account.can_approve_ownership_changes
    assert account.id_verified_by == "admin"
    assert store.audit_log[-1].action_type == AuditActionType.ID_VERIFICATION_APPROVED


def test_approved_account_can_then_own(verification, ledger):
    """A freshly verified account can receive a stake."""
    verification_id = _submit(verification, "u").value
    verification.approve_id_verification(verification_id, "admin", notes="looks fine")
    assert ledger.add_company_owner("c1", "u", "Uma", 25, granted_by="admin").success


def test_verified_account_cannot_resubmit(verification):
    """A verified account cannot submit again."""
    verification_id = _submit(verification, "u").value
    verification.approve_id_verification(verification_id, "admin")
    assert _submit(verification, "u").error.kind == ErrorKind.CONFLICT


def test_reject_keeps_capabilities_off(verification, store, account_of):
    """Rejection records the reason and grants nothing."""
    verification_id = _submit(verification, "u").value

    assert verification.reject_id_verification(verification_id, "admin", "blurry photo").success

    record = store.run_transaction(lambda uow: uow.verifications.get(verification_id))
    assert record.status == IdVerificationStatus.REJECTED
    assert record.rejection_reason == "blurry photo"
    account = account_of("u")
    assert account.id_verification_status == IdVerificationStatus.REJECTED
    assert account.restriction_reason == "blurry photo"
    assert account.can_own_companies is False
    assert store.audit_log[-1].action_type == AuditActionType.ID_VERIFICATION_REJECTED


def test_reject_requires_reason(verification):
    """A blank rejection reason is VALIDATION."""
    verification_id = _submit(verification, "u").value
    assert verification.reject_id_verification(verification_id, "admin", " ").error.kind == ErrorKind.VALIDATION


def test_review_is_one_way(verification):
    """Only PENDING_REVIEW records can be reviewed."""
    verification_id = _submit(verification, "u").value
    verification.reject_id_verification(verification_id, "admin", "blurry photo")

    second_reject = verification.reject_id_verification(verification_id, "admin", "again")
    late_approve = verification.approve_id_verification(verification_id, "admin")

    assert second_reject.error.kind == ErrorKind.CONFLICT
    assert second_reject.error.message == "Verification already REJECTED"
    assert late_approve.error.kind == ErrorKind.CONFLICT


def test_resubmission_after_rejection(verification):
    """A rejected account may submit a new record."""
    first = _submit(verification, "u").value
    verification.reject_id_verification(first, "admin", "blurry photo")
    second = _submit(verification, "u")
    assert second.success
    assert second.value != first


def test_review_unknown_verification(verification):
    """Reviewing a missing verification is NOT_FOUND."""
    result = verification.approve_id_verification("missing", "admin")
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert result.error.message == "Verification not found"


def test_dispute_names_both_holders(verification, store, holder):
    """The dispute names the oldest holder and the flagged account."""
    _submit(verification, "u")  # flagged, number stored on "u"

    result = verification.report_fraud_dispute(
        HOLDER_ID,
        reported_by="u",
        reported_by_name="Uma",
        explanation="That ID is mine",
        reported_by_email="uma@example.com",
        supporting_documents=[SupportingDocument("https://files.example/p.pdf", "d/p.pdf", "p.pdf")],
    )

    assert result.success
    dispute = store.run_transaction(lambda uow: uow.disputes.get(result.value))
    assert dispute.existing_account_id == "h"
    assert dispute.existing_account_name == "Helen"
    assert dispute.new_account_id == "u"
    assert dispute.status == DisputeStatus.PENDING
    assert dispute.priority == DisputePriority.HIGH
    assert dispute.supporting_documents[0].uploaded_at is not None
    assert dispute.reported_at is not None


def test_dispute_without_second_holder_names_reporter(verification, store, holder):
    """With a single holder the reporter is named as the new account."""
    result = verification.report_fraud_dispute(HOLDER_ID, "x", "Xavier", "Someone used my number")
    dispute = store.run_transaction(lambda uow: uow.disputes.get(result.value))
    assert dispute.new_account_id == "x"
    assert dispute.new_account_name == "Xavier"


def test_dispute_for_unknown_number(verification):
    """A dispute for an unheld number is NOT_FOUND."""
    result = verification.report_fraud_dispute(HOLDER_ID, "x", "Xavier", "hm")
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert result.error.message == "No account found with this national ID number"


def test_dispute_requires_explanation(verification, holder):
    """A blank explanation is VALIDATION."""
    result = verification.report_fraud_dispute(HOLDER_ID, "x", "Xavier", "   ")
    assert result.error.kind == ErrorKind.VALIDATION
