from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuditActionType(str, Enum):
    COMPANY_OWNERSHIP_ADDED = "company_ownership_added"
    COMPANY_OWNERSHIP_CHANGED = "company_ownership_changed"
    COMPANY_OWNERSHIP_REVOKED = "company_ownership_revoked"
    COMPANY_ROLE_ASSIGNED = "company_role_assigned"
    COMPANY_ROLE_REVOKED = "company_role_revoked"
    ID_VERIFICATION_SUBMITTED = "id_verification_submitted"
    ID_VERIFICATION_APPROVED = "id_verification_approved"
    ID_VERIFICATION_REJECTED = "id_verification_rejected"


class TargetEntityType(str, Enum):
    OWNERSHIP = "ownership"
    ROLE = "role"
    MASTER_ACCOUNT = "master_account"


def serialize_value(payload: dict[str, object]) -> str:
    """JSON with Decimals as strings and stable key order."""
    return json.dumps(payload, default=str, sort_keys=True)


@dataclass(frozen=True)
class AuditLogEntry:
    """Write-once record of a mutation. The core appends, never reads back."""
    id: str
    master_account_id: str
    master_account_name: str
    action_type: AuditActionType
    action_description: str
    performed_by: str
    target_entity: str
    target_entity_type: TargetEntityType
    company_id: str | None = None
    performed_by_name: str = ""
    previous_value: str | None = None
    new_value: str | None = None
    timestamp: datetime | None = None
