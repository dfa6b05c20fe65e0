from __future__ import annotations

from dataclasses import dataclass

_SEPARATORS = " -./"
_VISIBLE = 4


def normalize_national_id(raw: object) -> str:
    """Drop separators and upper-case. Does not validate."""
    return "".join(c for c in str(raw) if c not in _SEPARATORS).upper()


@dataclass(frozen=True)
class NationalIdNumber:
    """Immutable national ID number. NEVER exposes the full value in repr/str.

    Separators (spaces, dashes, dots, slashes) are dropped and letters are
    upper-cased, so "8001 0150-09 08 7" and "8001015009087" are the same ID.
    """
    _value: str

    def __init__(self, raw: str) -> None:
        normalized = normalize_national_id(raw)
        if not normalized:
            raise ValueError("National ID number cannot be empty")
        if not normalized.isalnum():
            raise ValueError("National ID number must contain only letters and digits")
        object.__setattr__(self, "_value", normalized)

    @property
    def value(self) -> str:
        """Normalised number. Use with care, never log it."""
        return self._value

    @property
    def masked(self) -> str:
        """Last 4 characters visible, short numbers fully starred; safe for logs."""
        if len(self._value) <= _VISIBLE:
            return "*" * len(self._value)
        return "*" * (len(self._value) - _VISIBLE) + self._value[-_VISIBLE:]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NationalIdNumber):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"NationalIdNumber({self.masked!r})"

    def __str__(self) -> str:
        return self.masked
