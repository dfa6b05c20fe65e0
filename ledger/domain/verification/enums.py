from __future__ import annotations

from enum import Enum


class IdVerificationStatus(str, Enum):
    NOT_SUBMITTED = "NOT_SUBMITTED"
    PENDING_REVIEW = "PENDING_REVIEW"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class DuplicateIdStatus(str, Enum):
    NONE = "NONE"
    DUPLICATE_DETECTED = "DUPLICATE_DETECTED"


class DocumentType(str, Enum):
    NATIONAL_ID = "national_id"
    PASSPORT = "passport"
    DRIVERS_LICENSE = "drivers_license"
    OTHER = "other"


class DisputeStatus(str, Enum):
    PENDING = "pending"


class DisputePriority(str, Enum):
    HIGH = "high"


class DisputeType(str, Enum):
    DUPLICATE_ID = "duplicate_id"
