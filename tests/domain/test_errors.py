# tests/domain/test_errors.py
from decimal import Decimal

from ledger.domain.errors import ErrorKind, LedgerError, Result, format_percentage


def test_format_percentage_drops_trailing_zeros():
    """Percentages in messages carry no trailing zeros."""
    assert format_percentage(Decimal("40.0000")) == "40"
    assert format_percentage(Decimal("33.3300")) == "33.33"
    assert format_percentage(Decimal("100.0000")) == "100"


def test_result_success_iff_no_error():
    """A Result succeeds exactly when it holds no error."""
    assert Result.ok("id-1").success
    assert Result.ok().success
    failed = Result.fail(LedgerError.not_found("Ownership record", "x"))
    assert not failed.success
    assert failed.value is None


def test_error_messages():
    """Factory methods build the expected kind, message and context."""
    assert LedgerError.not_found("Ownership record", "x").message == "Ownership record not found"
    assert LedgerError.not_eligible_to_own("a").kind == ErrorKind.PERMISSION
    dup = LedgerError.duplicate_national_id("acc-1", "Alice")
    assert dup.kind == ErrorKind.CONFLICT
    assert dup.message.startswith("This national ID number is already registered to Alice.")
    assert dup.context["existing_account_id"] == "acc-1"


def test_str_is_message():
    """str() of an error is its message."""
    error = LedgerError.percentage_out_of_range(150)
    assert str(error) == "Ownership percentage must be between 0 and 100"
    assert error.kind == ErrorKind.VALIDATION
