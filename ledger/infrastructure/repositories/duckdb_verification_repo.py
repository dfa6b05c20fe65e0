from __future__ import annotations

import duckdb

from ledger.domain.verification.entities import (
    DocumentMetadata,
    FraudDispute,
    MasterAccount,
    MasterIDVerification,
    SupportingDocument,
)
from ledger.domain.verification.enums import (
    DisputePriority,
    DisputeStatus,
    DisputeType,
    DocumentType,
    DuplicateIdStatus,
    IdVerificationStatus,
)
from ledger.domain.verification.value_objects import normalize_national_id

from ._sql import NOW

_ACCOUNT_COLUMNS = """
    id, name, national_id_number, can_own_companies, can_receive_payouts,
    can_approve_ownership_changes, id_verification_status, duplicate_id_status,
    id_document_url, id_verified_at, id_verified_by, restriction_reason,
    created_at, updated_at
"""

_VERIFICATION_COLUMNS = """
    id, master_account_id, national_id_number, document_type, document_url,
    storage_path, status, file_name, file_size, mime_type, submitted_at,
    reviewed_at, reviewed_by, review_notes, rejection_reason, verified_at
"""


def _opt_str(raw: object) -> str | None:
    return str(raw) if raw is not None else None


class DuckDBMasterAccountRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, master_account_id: str) -> MasterAccount | None:
        row = self._conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM master_accounts WHERE id = ?",  # noqa: S608
            [master_account_id],
        ).fetchone()
        return self._hydrate(row) if row else None

    def find_by_national_id(self, national_id_number: str) -> list[MasterAccount]:
        rows = self._conn.execute(
            f"""
            SELECT {_ACCOUNT_COLUMNS} FROM master_accounts
            WHERE upper(regexp_replace(national_id_number, '[ ./-]', '', 'g')) = ?
            ORDER BY created_at, rowid
        """,  # noqa: S608
            [normalize_national_id(national_id_number)],
        ).fetchall()
        return [self._hydrate(r) for r in rows]

    def link_company(self, master_account_id: str, company_id: str) -> None:
        already = self._conn.execute(
            "SELECT 1 FROM master_account_companies WHERE master_account_id = ? AND company_id = ?",
            [master_account_id, company_id],
        ).fetchone()
        if already:
            return
        self._conn.execute(
            f"INSERT INTO master_account_companies VALUES (?, ?, {NOW})",  # noqa: S608
            [master_account_id, company_id],
        )
        self._touch(master_account_id)

    def flag_duplicate_id(self, master_account_id: str, national_id_number: str) -> None:
        self._conn.execute(
            f"""
            UPDATE master_accounts
            SET duplicate_id_status = ?, national_id_number = ?, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [DuplicateIdStatus.DUPLICATE_DETECTED.value, national_id_number, master_account_id],
        )

    def mark_verification_pending(
        self,
        master_account_id: str,
        national_id_number: str,
        document_url: str,
    ) -> None:
        self._conn.execute(
            f"""
            UPDATE master_accounts
            SET national_id_number = ?, id_verification_status = ?, id_document_url = ?,
                duplicate_id_status = ?, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [
                national_id_number,
                IdVerificationStatus.PENDING_REVIEW.value,
                document_url,
                DuplicateIdStatus.NONE.value,
                master_account_id,
            ],
        )

    def mark_verified(self, master_account_id: str, admin_id: str) -> None:
        self._conn.execute(
            f"""
            UPDATE master_accounts
            SET id_verification_status = ?, id_verified_at = {NOW}, id_verified_by = ?,
                can_own_companies = TRUE, can_receive_payouts = TRUE,
                can_approve_ownership_changes = TRUE, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [IdVerificationStatus.VERIFIED.value, admin_id, master_account_id],
        )

    def mark_rejected(self, master_account_id: str, reason: str) -> None:
        self._conn.execute(
            f"""
            UPDATE master_accounts
            SET id_verification_status = ?, restriction_reason = ?, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [IdVerificationStatus.REJECTED.value, reason, master_account_id],
        )

    def _touch(self, master_account_id: str) -> None:
        self._conn.execute(
            f"UPDATE master_accounts SET updated_at = {NOW} WHERE id = ?",  # noqa: S608
            [master_account_id],
        )

    def _company_ids(self, master_account_id: str) -> tuple[str, ...]:
        rows = self._conn.execute(
            """
            SELECT company_id FROM master_account_companies
            WHERE master_account_id = ? ORDER BY linked_at, rowid
        """,
            [master_account_id],
        ).fetchall()
        return tuple(str(r[0]) for r in rows)

    def _hydrate(self, row: tuple) -> MasterAccount:  # type: ignore[type-arg]
        return MasterAccount(
            id=str(row[0]),
            name=str(row[1]),
            national_id_number=_opt_str(row[2]),
            can_own_companies=bool(row[3]),
            can_receive_payouts=bool(row[4]),
            can_approve_ownership_changes=bool(row[5]),
            id_verification_status=IdVerificationStatus(str(row[6])),
            duplicate_id_status=DuplicateIdStatus(str(row[7])),
            id_document_url=_opt_str(row[8]),
            id_verified_at=row[9],
            id_verified_by=_opt_str(row[10]),
            restriction_reason=_opt_str(row[11]),
            company_ids=self._company_ids(str(row[0])),
            created_at=row[12],
            updated_at=row[13],
        )


class DuckDBVerificationRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, verification_id: str) -> MasterIDVerification | None:
        row = self._conn.execute(
            f"SELECT {_VERIFICATION_COLUMNS} FROM master_id_verifications WHERE id = ?",  # noqa: S608
            [verification_id],
        ).fetchone()
        return self._hydrate(row) if row else None

    def list_by_master_account(self, master_account_id: str) -> list[MasterIDVerification]:
        rows = self._conn.execute(
            f"""
            SELECT {_VERIFICATION_COLUMNS} FROM master_id_verifications
            WHERE master_account_id = ? ORDER BY submitted_at, rowid
        """,  # noqa: S608
            [master_account_id],
        ).fetchall()
        return [self._hydrate(r) for r in rows]

    def add(self, verification: MasterIDVerification) -> None:
        metadata = verification.metadata or DocumentMetadata()
        self._conn.execute(
            f"""
            INSERT INTO master_id_verifications (
                id, master_account_id, national_id_number, document_type,
                document_url, storage_path, status, file_name, file_size, mime_type,
                submitted_at, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, {NOW}, {NOW}, {NOW})
        """,  # noqa: S608
            [
                verification.id,
                verification.master_account_id,
                verification.national_id_number,
                verification.document_type.value,
                verification.document_url,
                verification.storage_path,
                verification.status.value,
                metadata.file_name,
                metadata.file_size,
                metadata.mime_type,
            ],
        )

    def mark_verified(self, verification_id: str, admin_id: str, notes: str) -> None:
        self._conn.execute(
            f"""
            UPDATE master_id_verifications
            SET status = ?, reviewed_at = {NOW}, reviewed_by = ?, review_notes = ?,
                verified_at = {NOW}, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [IdVerificationStatus.VERIFIED.value, admin_id, notes, verification_id],
        )

    def mark_rejected(self, verification_id: str, admin_id: str, reason: str) -> None:
        self._conn.execute(
            f"""
            UPDATE master_id_verifications
            SET status = ?, reviewed_at = {NOW}, reviewed_by = ?, rejection_reason = ?,
                updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [IdVerificationStatus.REJECTED.value, admin_id, reason, verification_id],
        )

    def _hydrate(self, row: tuple) -> MasterIDVerification:  # type: ignore[type-arg]
        has_metadata = any(v is not None for v in (row[7], row[8], row[9]))
        return MasterIDVerification(
            id=str(row[0]),
            master_account_id=str(row[1]),
            national_id_number=str(row[2]),
            document_type=DocumentType(str(row[3])),
            document_url=str(row[4]),
            storage_path=str(row[5]),
            status=IdVerificationStatus(str(row[6])),
            metadata=DocumentMetadata(
                file_name=_opt_str(row[7]),
                file_size=int(row[8]) if row[8] is not None else None,
                mime_type=_opt_str(row[9]),
            )
            if has_metadata
            else None,
            submitted_at=row[10],
            reviewed_at=row[11],
            reviewed_by=_opt_str(row[12]),
            review_notes=_opt_str(row[13]),
            rejection_reason=_opt_str(row[14]),
            verified_at=row[15],
        )


class DuckDBFraudDisputeRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, dispute_id: str) -> FraudDispute | None:
        row = self._conn.execute(
            """
            SELECT id, national_id_number, reported_by, reported_by_name, reported_by_email,
                   existing_account_id, existing_account_name, new_account_id, new_account_name,
                   status, priority, dispute_type, explanation, reported_at
            FROM fraud_disputes WHERE id = ?
        """,
            [dispute_id],
        ).fetchone()
        if row is None:
            return None
        documents = self._conn.execute(
            """
            SELECT url, storage_path, file_name, uploaded_at
            FROM fraud_dispute_documents WHERE dispute_id = ? ORDER BY seq
        """,
            [dispute_id],
        ).fetchall()
        return FraudDispute(
            id=str(row[0]),
            national_id_number=str(row[1]),
            reported_by=str(row[2]),
            reported_by_name=str(row[3]),
            reported_by_email=_opt_str(row[4]),
            existing_account_id=str(row[5]),
            existing_account_name=str(row[6]),
            new_account_id=str(row[7]),
            new_account_name=str(row[8]),
            status=DisputeStatus(str(row[9])),
            priority=DisputePriority(str(row[10])),
            dispute_type=DisputeType(str(row[11])),
            explanation=str(row[12]),
            reported_at=row[13],
            supporting_documents=tuple(
                SupportingDocument(url=str(d[0]), storage_path=str(d[1]), file_name=str(d[2]), uploaded_at=d[3])
                for d in documents
            ),
        )

    def add(self, dispute: FraudDispute) -> None:
        self._conn.execute(
            f"""
            INSERT INTO fraud_disputes (
                id, national_id_number, reported_by, reported_by_name, reported_by_email,
                existing_account_id, existing_account_name, new_account_id, new_account_name,
                status, priority, dispute_type, explanation,
                reported_at, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, {NOW}, {NOW}, {NOW})
        """,  # noqa: S608
            [
                dispute.id,
                dispute.national_id_number,
                dispute.reported_by,
                dispute.reported_by_name,
                dispute.reported_by_email,
                dispute.existing_account_id,
                dispute.existing_account_name,
                dispute.new_account_id,
                dispute.new_account_name,
                dispute.status.value,
                dispute.priority.value,
                dispute.dispute_type.value,
                dispute.explanation,
            ],
        )
        for seq, document in enumerate(dispute.supporting_documents):
            self._conn.execute(
                f"INSERT INTO fraud_dispute_documents VALUES (?, ?, ?, ?, ?, {NOW})",  # noqa: S608
                [dispute.id, seq, document.url, document.storage_path, document.file_name],
            )
