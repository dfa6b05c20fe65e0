from __future__ import annotations

from typing import Protocol

from .entities import AuditLogEntry


class AuditLogSink(Protocol):
    def append(self, entry: AuditLogEntry) -> None: ...
