from __future__ import annotations

import duckdb

from ledger.domain.audit.entities import AuditLogEntry

from ._sql import NOW


class DuckDBAuditLogSink:
    """Append-only: the ledger never reads the audit log back."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def append(self, entry: AuditLogEntry) -> None:
        self._conn.execute(
            f"""
            INSERT INTO master_account_audit_logs (
                id, master_account_id, master_account_name, company_id,
                action_type, action_description, performed_by, performed_by_name,
                target_entity, target_entity_type, previous_value, new_value, logged_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, {NOW})
        """,  # noqa: S608
            [
                entry.id,
                entry.master_account_id,
                entry.master_account_name,
                entry.company_id,
                entry.action_type.value,
                entry.action_description,
                entry.performed_by,
                entry.performed_by_name,
                entry.target_entity,
                entry.target_entity_type.value,
                entry.previous_value,
                entry.new_value,
            ],
        )
