# tests/domain/test_percentage_vo.py
import dataclasses
from decimal import Decimal

import pytest

from ledger.domain.ownership.value_objects import OwnershipPercentage, Permissions


def test_percentage_quantized_to_four_places():
    """Stores the percentage as a Decimal rounded to 4 places."""
    assert OwnershipPercentage("33.3").value == Decimal("33.3000")
    assert OwnershipPercentage(Decimal("12.34567")).value == Decimal("12.3457")


def test_float_goes_through_str():
    """33.3 as float must not become 33.2999..."""
    assert OwnershipPercentage(33.3).value == Decimal("33.3000")


def test_upper_bound_inclusive():
    """100 is a valid stake."""
    assert OwnershipPercentage(100).value == Decimal("100.0000")


@pytest.mark.parametrize("raw", [0, "0", -1, "100.0001", 150, "1e1000"])
def test_out_of_range_rejected(raw):
    """Zero, negative and above-100 values raise ValueError."""
    with pytest.raises(ValueError):
        OwnershipPercentage(raw)


@pytest.mark.parametrize("raw", ["abc", None, "NaN", "Infinity", ""])
def test_not_a_number_rejected(raw):
    """Non-numeric and non-finite input raises ValueError."""
    with pytest.raises(ValueError):
        OwnershipPercentage(raw)


def test_rounds_to_zero_is_rejected():
    """A value that quantizes to 0 is not a stake."""
    with pytest.raises(ValueError):
        OwnershipPercentage("0.00001")


def test_str_is_normalized():
    """str() drops trailing zeros."""
    assert str(OwnershipPercentage("40")) == "40"
    assert str(OwnershipPercentage("33.33")) == "33.33"


def test_percentage_immutable():
    """The value object is frozen."""
    pct = OwnershipPercentage(10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pct.value = Decimal("20")  # type: ignore[misc]


def test_permissions_deduplicated_in_order():
    """Duplicates are dropped, first occurrence wins, names trimmed."""
    perms = Permissions(["view_finances", " approve_payouts ", "view_finances"])
    assert perms.values == ("view_finances", "approve_payouts")
    assert "approve_payouts" in perms
    assert len(perms) == 2


def test_permissions_reject_bare_string():
    """A single string is not a list of permissions."""
    with pytest.raises(ValueError):
        Permissions("view_finances")


def test_permissions_reject_blank_name():
    """Blank permission names raise ValueError."""
    with pytest.raises(ValueError, match="cannot be empty"):
        Permissions(["ok", "  "])


def test_permissions_may_be_empty():
    """An empty permission list is allowed."""
    assert Permissions([]).values == ()
