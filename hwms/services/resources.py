# hwms/services/resources.py
"""
Resource kinds known to the authorization engine and where each one keeps its tenant.
"""

from enum import Enum as PyEnum
from typing import Any, Mapping
from uuid import UUID

from hwms.core.errors import DependencyFailure


class ResourceKind(str, PyEnum):
    """Values are the record-store table names."""

    HOSPITAL = "hospitals"
    DEPARTMENT = "departments"
    PROFILE = "profiles"
    PATIENT = "patients"
    TASK = "tasks"
    TASK_COMMENT = "task_comments"
    SHIFT = "shifts"
    LEAVE_REQUEST = "leave_requests"
    SWAP_REQUEST = "swap_requests"
    HANDOVER = "handovers"

    @property
    def table(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ResourceKind.HOSPITAL: "Hospital",
    ResourceKind.DEPARTMENT: "Department",
    ResourceKind.PROFILE: "Profile",
    ResourceKind.PATIENT: "Patient",
    ResourceKind.TASK: "Task",
    ResourceKind.TASK_COMMENT: "Comment",
    ResourceKind.SHIFT: "Shift",
    ResourceKind.LEAVE_REQUEST: "Leave request",
    ResourceKind.SWAP_REQUEST: "Swap request",
    ResourceKind.HANDOVER: "Handover",
}

# Swap requests have no hospital_id of their own; the store joins their shift.
_TENANT_COLUMNS = {
    ResourceKind.HOSPITAL: "id",
    ResourceKind.SWAP_REQUEST: "shift.hospital_id",
}


def tenant_column(kind: ResourceKind) -> str:
    return _TENANT_COLUMNS.get(kind, "hospital_id")


def tenant_of(kind: ResourceKind, row: Mapping[str, Any]) -> UUID | None:
    """Stored tenant of a fetched row (for swap requests, its shift's hospital)."""
    if kind is ResourceKind.SWAP_REQUEST:
        shift = row.get("shift")
        if not shift:
            raise DependencyFailure("Shift relation missing")
        return shift.get("hospital_id")
    return row.get(tenant_column(kind))
