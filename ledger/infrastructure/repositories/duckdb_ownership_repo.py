from __future__ import annotations

from decimal import Decimal

import duckdb

from ledger.domain.ownership.entities import Company, CompanyOwnership, CompanyRole
from ledger.domain.ownership.enums import CompanyRoleType, OwnershipStatus, RoleStatus

from ._sql import NOW, as_decimal

_OWNERSHIP_COLUMNS = """
    id, company_id, master_account_id, master_account_name,
    ownership_percentage, status, voting_rights, economic_rights,
    notes, granted_at, granted_by, approved_at, approved_by,
    created_at, updated_at, revoked_at, revoked_by
"""

_ROLE_COLUMNS = """
    id, company_id, master_account_id, master_account_name,
    role, custom_role_name, permissions, status, notes,
    assigned_at, assigned_by, created_at, updated_at, revoked_at, revoked_by
"""


class DuckDBOwnershipRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, ownership_id: str) -> CompanyOwnership | None:
        row = self._conn.execute(
            f"SELECT {_OWNERSHIP_COLUMNS} FROM company_ownership WHERE id = ?",  # noqa: S608
            [ownership_id],
        ).fetchone()
        return self._hydrate(row) if row else None

    def list_by_company(self, company_id: str, include_inactive: bool = False) -> list[CompanyOwnership]:
        return self._list("company_id", company_id, include_inactive)

    def list_by_master_account(
        self,
        master_account_id: str,
        include_inactive: bool = False,
    ) -> list[CompanyOwnership]:
        return self._list("master_account_id", master_account_id, include_inactive)

    def add(self, ownership: CompanyOwnership) -> None:
        self._conn.execute(
            f"""
            INSERT INTO company_ownership (
                id, company_id, master_account_id, master_account_name,
                ownership_percentage, status, voting_rights, economic_rights,
                notes, granted_by, approved_by,
                granted_at, approved_at, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, {NOW}, {NOW}, {NOW}, {NOW})
        """,  # noqa: S608
            [
                ownership.id,
                ownership.company_id,
                ownership.master_account_id,
                ownership.master_account_name,
                ownership.ownership_percentage,
                ownership.status.value,
                ownership.voting_rights,
                ownership.economic_rights,
                ownership.notes,
                ownership.granted_by,
                ownership.approved_by or ownership.granted_by,
            ],
        )

    def update_percentage(self, ownership_id: str, percentage: Decimal) -> None:
        self._conn.execute(
            f"UPDATE company_ownership SET ownership_percentage = ?, updated_at = {NOW} WHERE id = ?",  # noqa: S608
            [percentage, ownership_id],
        )

    def revoke(self, ownership_id: str, revoked_by: str) -> None:
        self._conn.execute(
            f"""
            UPDATE company_ownership
            SET status = ?, revoked_by = ?, revoked_at = {NOW}, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [OwnershipStatus.REVOKED.value, revoked_by, ownership_id],
        )

    def _list(self, column: str, value: str, include_inactive: bool) -> list[CompanyOwnership]:
        # column comes from the two call sites above, never from callers.
        sql = f"SELECT {_OWNERSHIP_COLUMNS} FROM company_ownership WHERE {column} = ?"  # noqa: S608
        params: list[object] = [value]
        if not include_inactive:
            sql += " AND status = ?"
            params.append(OwnershipStatus.ACTIVE.value)
        sql += " ORDER BY created_at, rowid"
        return [self._hydrate(r) for r in self._conn.execute(sql, params).fetchall()]

    def _hydrate(self, row: tuple) -> CompanyOwnership:  # type: ignore[type-arg]
        return CompanyOwnership(
            id=str(row[0]),
            company_id=str(row[1]),
            master_account_id=str(row[2]),
            master_account_name=str(row[3]),
            ownership_percentage=as_decimal(row[4]),
            status=OwnershipStatus(str(row[5])),
            voting_rights=bool(row[6]),
            economic_rights=bool(row[7]),
            notes=str(row[8]) if row[8] is not None else None,
            granted_at=row[9],
            granted_by=str(row[10]),
            approved_at=row[11],
            approved_by=str(row[12]) if row[12] is not None else None,
            created_at=row[13],
            updated_at=row[14],
            revoked_at=row[15],
            revoked_by=str(row[16]) if row[16] is not None else None,
        )


class DuckDBRoleRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, role_id: str) -> CompanyRole | None:
        row = self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM company_roles WHERE id = ?",  # noqa: S608
            [role_id],
        ).fetchone()
        return self._hydrate(row) if row else None

    def list_by_master_account(
        self,
        master_account_id: str,
        company_id: str | None = None,
        include_inactive: bool = False,
    ) -> list[CompanyRole]:
        sql = f"SELECT {_ROLE_COLUMNS} FROM company_roles WHERE master_account_id = ?"  # noqa: S608
        params: list[object] = [master_account_id]
        if company_id is not None:
            sql += " AND company_id = ?"
            params.append(company_id)
        if not include_inactive:
            sql += " AND status = ?"
            params.append(RoleStatus.ACTIVE.value)
        sql += " ORDER BY created_at, rowid"
        return [self._hydrate(r) for r in self._conn.execute(sql, params).fetchall()]

    def add(self, role: CompanyRole) -> None:
        self._conn.execute(
            f"""
            INSERT INTO company_roles (
                id, company_id, master_account_id, master_account_name,
                role, custom_role_name, permissions, status, notes, assigned_by,
                assigned_at, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, {NOW}, {NOW}, {NOW})
        """,  # noqa: S608
            [
                role.id,
                role.company_id,
                role.master_account_id,
                role.master_account_name,
                role.role.value,
                role.custom_role_name,
                list(role.permissions),
                role.status.value,
                role.notes,
                role.assigned_by,
            ],
        )

    def revoke(self, role_id: str, revoked_by: str) -> None:
        self._conn.execute(
            f"""
            UPDATE company_roles
            SET status = ?, revoked_by = ?, revoked_at = {NOW}, updated_at = {NOW}
            WHERE id = ?
        """,  # noqa: S608
            [RoleStatus.REVOKED.value, revoked_by, role_id],
        )

    def _hydrate(self, row: tuple) -> CompanyRole:  # type: ignore[type-arg]
        return CompanyRole(
            id=str(row[0]),
            company_id=str(row[1]),
            master_account_id=str(row[2]),
            master_account_name=str(row[3]),
            role=CompanyRoleType(str(row[4])),
            custom_role_name=str(row[5]) if row[5] is not None else None,
            permissions=tuple(str(p) for p in (row[6] or [])),
            status=RoleStatus(str(row[7])),
            notes=str(row[8]) if row[8] is not None else None,
            assigned_at=row[9],
            assigned_by=str(row[10]),
            created_at=row[11],
            updated_at=row[12],
            revoked_at=row[13],
            revoked_by=str(row[14]) if row[14] is not None else None,
        )


class DuckDBCompanyRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def get(self, company_id: str) -> Company | None:
        row = self._conn.execute(
            """
            SELECT company_id, total_ownership_percentage, owner_count, updated_at
            FROM companies WHERE company_id = ?
        """,
            [company_id],
        ).fetchone()
        if row is None:
            return None
        return Company(
            company_id=str(row[0]),
            total_ownership_percentage=as_decimal(row[1]),
            owner_count=int(row[2]),
            updated_at=row[3],
        )

    def save_totals(self, company_id: str, total: Decimal, owner_count: int) -> None:
        # Select-then-write instead of ON CONFLICT: a concurrent first insert
        # for the same company still fails on the primary key and is retried.
        exists = self._conn.execute(
            "SELECT 1 FROM companies WHERE company_id = ?",
            [company_id],
        ).fetchone()
        if exists:
            self._conn.execute(
                f"""
                UPDATE companies
                SET total_ownership_percentage = ?, owner_count = ?, updated_at = {NOW}
                WHERE company_id = ?
            """,  # noqa: S608
                [total, owner_count, company_id],
            )
        else:
            self._conn.execute(
                f"INSERT INTO companies VALUES (?, ?, ?, {NOW})",  # noqa: S608
                [company_id, total, owner_count],
            )
