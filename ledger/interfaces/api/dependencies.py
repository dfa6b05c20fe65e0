# ledger/interfaces/api/dependencies.py
from ledger.application.services.id_verification import IdVerificationService
from ledger.application.services.ownership_ledger import OwnershipLedger
from ledger.infrastructure.config import get_settings
from ledger.infrastructure.duckdb_connection import get_connection
from ledger.infrastructure.repositories.duckdb_store import DuckDBStore


def get_store() -> DuckDBStore:
    return DuckDBStore(get_connection(), max_attempts=get_settings().tx_max_attempts)


def get_ownership_ledger() -> OwnershipLedger:
    return OwnershipLedger(get_store(), allow_multiple_roles=get_settings().allow_multiple_roles)


def get_verification_service() -> IdVerificationService:
    return IdVerificationService(get_store())
