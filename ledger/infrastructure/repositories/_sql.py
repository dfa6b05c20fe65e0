from __future__ import annotations

from decimal import Decimal

# Store clock. Inside a transaction DuckDB returns the transaction start time,
# so every row written by one ledger operation carries the same instant.
NOW = "CAST(current_timestamp AS TIMESTAMP)"


def as_decimal(raw: object) -> Decimal:
    if raw is None:
        return Decimal("0")
    if isinstance(raw, Decimal):
        return raw
    return Decimal(str(raw))
