# tests/domain/test_allocation_service.py
from decimal import Decimal

from ledger.domain.errors import ErrorKind
from ledger.domain.ownership.entities import CompanyOwnership
from ledger.domain.ownership.enums import OwnershipStatus
from ledger.domain.ownership.services import OwnershipAllocationService


def _stake(stake_id: str, account: str, pct: str, status: OwnershipStatus = OwnershipStatus.ACTIVE):
    return CompanyOwnership(
        id=stake_id,
        company_id="c1",
        master_account_id=account,
        master_account_name=account.upper(),
        ownership_percentage=Decimal(pct),
        granted_by="admin",
        status=status,
    )


def test_active_total_ignores_revoked():
    """Revoked stakes count toward neither the total nor the owner count."""
    stakes = [_stake("o1", "a", "60"), _stake("o2", "b", "30", OwnershipStatus.REVOKED)]
    assert OwnershipAllocationService.active_total(stakes) == Decimal("60")
    assert OwnershipAllocationService.active_count(stakes) == 1


def test_active_total_excludes_given_stake():
    """exclude_id leaves the stake being changed out of the total."""
    stakes = [_stake("o1", "a", "60"), _stake("o2", "b", "30")]
    assert OwnershipAllocationService.active_total(stakes, exclude_id="o1") == Decimal("30")


def test_addition_up_to_exactly_100_allowed():
    """A grant that brings the total to exactly 100% passes."""
    stakes = [_stake("o1", "a", "60")]
    assert OwnershipAllocationService.check_addition(stakes, "b", Decimal("40")) is None


def test_addition_over_100_is_invariant_violation():
    """Going over 100% names the current total and the attempted stake."""
    stakes = [_stake("o1", "a", "60")]
    error = OwnershipAllocationService.check_addition(stakes, "b", Decimal("50"))
    assert error is not None
    assert error.kind == ErrorKind.INVARIANT_VIOLATION
    assert error.message == "Cannot add 50% ownership. Current total: 60%. Would exceed 100%."
    assert error.context == {"current_total": Decimal("60"), "attempted": Decimal("50")}


def test_total_checked_before_existing_holder():
    """The 100% cap is reported before the existing-holder conflict."""
    stakes = [_stake("o1", "a", "60")]
    error = OwnershipAllocationService.check_addition(stakes, "a", Decimal("50"))
    assert error is not None
    assert error.kind == ErrorKind.INVARIANT_VIOLATION


def test_existing_active_holder_is_conflict():
    """A second active stake for the same account is a conflict."""
    stakes = [_stake("o1", "a", "60")]
    error = OwnershipAllocationService.check_addition(stakes, "a", Decimal("10"))
    assert error is not None
    assert error.kind == ErrorKind.CONFLICT


def test_revoked_holder_may_be_granted_again():
    """A revoked holder can receive a new stake."""
    stakes = [_stake("o1", "a", "60", OwnershipStatus.REVOKED)]
    assert OwnershipAllocationService.check_addition(stakes, "a", Decimal("100")) is None


def test_change_counts_only_other_owners():
    """A change is checked against the other owners' total only."""
    stakes = [_stake("o1", "a", "60"), _stake("o2", "b", "40")]
    assert OwnershipAllocationService.check_change(stakes, "o1", Decimal("60")) is None
    error = OwnershipAllocationService.check_change(stakes, "o1", Decimal("70"))
    assert error is not None
    assert error.message == "Cannot change to 70%. Other owners total: 40%. Would exceed 100%."
