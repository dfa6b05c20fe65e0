from __future__ import annotations

from enum import Enum


class OwnershipStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class RoleStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class CompanyRoleType(str, Enum):
    DIRECTOR = "Director"
    ADMIN = "Admin"
    MANAGER = "Manager"
    VIEWER = "Viewer"
    CUSTOM = "Custom"
