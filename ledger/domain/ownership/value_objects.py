from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

_QUANTUM = Decimal("0.0001")
_ZERO = Decimal("0")
_CEILING = Decimal("100")


@dataclass(frozen=True)
class OwnershipPercentage:
    """Stake size as a Decimal with 4 places. Never float.

    Floats go through str() first so 33.3 becomes 33.3000, not 33.2999...
    """

    value: Decimal

    def __init__(self, raw: object) -> None:
        try:
            value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
        except (InvalidOperation, ValueError) as err:
            raise ValueError(f"Invalid percentage: {raw!r}") from err
        if not value.is_finite():
            raise ValueError(f"Invalid percentage: {raw!r}")
        if value > _CEILING:
            raise ValueError("Ownership percentage must be between 0 and 100")
        value = value.quantize(_QUANTUM, rounding=ROUND_HALF_EVEN)
        if value <= _ZERO or value > _CEILING:
            raise ValueError("Ownership percentage must be between 0 and 100")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return format(self.value.normalize(), "f")


@dataclass(frozen=True)
class Permissions:
    """Capability names, de-duplicated, insertion order kept."""

    values: tuple[str, ...]

    def __init__(self, raw: Iterable[str]) -> None:
        if isinstance(raw, str):
            raise ValueError("Permissions must be a list of capability strings")
        seen: list[str] = []
        for item in raw:
            name = str(item).strip()
            if not name:
                raise ValueError("Permission names cannot be empty")
            if name not in seen:
                seen.append(name)
        object.__setattr__(self, "values", tuple(seen))

    def __contains__(self, item: object) -> bool:
        return item in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
