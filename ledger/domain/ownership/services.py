# ledger/domain/ownership/services.py
#
# Pure allocation rules for company ownership.
#
# Design decisions:
#   - No IO. The application service reads the persisted active stakes inside
#     its transaction and hands them here; the verdict comes back as a
#     LedgerError (or None) instead of an exception so the rules can be
#     tested without a store.
#   - Totals are always recomputed from the stakes passed in. The company's
#     denormalised total is an output of this module, never an input.
#
# Invariants:
#   - Revoked stakes never count toward a total.
#   - check_addition reports the 100% violation before the duplicate-holder
#     conflict, matching the order callers have always seen.
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger.domain.errors import LedgerError

from .entities import CompanyOwnership

MAX_TOTAL = Decimal("100")


class OwnershipAllocationService:
    """Stateless. Methods are static; the class only namespaces them."""

    @staticmethod
    def active_total(
        stakes: Iterable[CompanyOwnership],
        exclude_id: str | None = None,
    ) -> Decimal:
        return sum(
            (s.ownership_percentage for s in stakes if s.is_active and s.id != exclude_id),
            Decimal("0"),
        )

    @staticmethod
    def active_count(stakes: Iterable[CompanyOwnership]) -> int:
        return sum(1 for s in stakes if s.is_active)

    @staticmethod
    def check_addition(
        stakes: list[CompanyOwnership],
        master_account_id: str,
        attempted: Decimal,
    ) -> LedgerError | None:
        current_total = OwnershipAllocationService.active_total(stakes)
        if current_total + attempted > MAX_TOTAL:
            return LedgerError.total_would_exceed(current_total, attempted)

        if any(s.is_active and s.master_account_id == master_account_id for s in stakes):
            return LedgerError.conflict(
                "Master account already owns part of this company. Use change ownership instead.",
                master_account_id=master_account_id,
            )
        return None

    @staticmethod
    def check_change(
        stakes: list[CompanyOwnership],
        ownership_id: str,
        attempted: Decimal,
    ) -> LedgerError | None:
        other_total = OwnershipAllocationService.active_total(stakes, exclude_id=ownership_id)
        if other_total + attempted > MAX_TOTAL:
            return LedgerError.others_would_exceed(other_total, attempted)
        return None
