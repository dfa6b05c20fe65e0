from __future__ import annotations

from typing import Protocol

from .entities import FraudDispute, MasterAccount, MasterIDVerification


class MasterAccountRepository(Protocol):
    def get(self, master_account_id: str) -> MasterAccount | None: ...

    def find_by_national_id(self, national_id_number: str) -> list[MasterAccount]:
        """All holders of the number, oldest account first.

        Stored numbers are compared after dropping separators and upper-casing.
        """
        ...

    def link_company(self, master_account_id: str, company_id: str) -> None:
        """Append company_id to company_ids if absent."""
        ...

    def flag_duplicate_id(self, master_account_id: str, national_id_number: str) -> None: ...

    def mark_verification_pending(
        self,
        master_account_id: str,
        national_id_number: str,
        document_url: str,
    ) -> None: ...

    def mark_verified(self, master_account_id: str, admin_id: str) -> None:
        """Sets VERIFIED and grants every ownership capability."""
        ...

    def mark_rejected(self, master_account_id: str, reason: str) -> None: ...


class VerificationRepository(Protocol):
    def get(self, verification_id: str) -> MasterIDVerification | None: ...

    def list_by_master_account(self, master_account_id: str) -> list[MasterIDVerification]: ...

    def add(self, verification: MasterIDVerification) -> None: ...

    def mark_verified(self, verification_id: str, admin_id: str, notes: str) -> None: ...

    def mark_rejected(self, verification_id: str, admin_id: str, reason: str) -> None: ...


class FraudDisputeRepository(Protocol):
    def get(self, dispute_id: str) -> FraudDispute | None: ...

    def add(self, dispute: FraudDispute) -> None: ...
