# hwms/services/tenant_guard_service.py
"""
Referential tenant guard.

Before a row is linked to a department, patient or shift, the referenced row
is fetched and its hospital compared to the tenant of the write. A missing
row and a row from another hospital get the same VALIDATION_ERROR.
"""

import logging
from uuid import UUID

from hwms.core.errors import ValidationFailed, dependency_call
from hwms.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def ensure_same_tenant(
    store: RecordStore,
    table: str,
    candidate_id: UUID,
    expected_hospital_id: UUID,
    field: str,
) -> None:
    with dependency_call(f"{field} lookup failed"):
        row = store.fetch_row(table, candidate_id)

    if row is None or row.get("hospital_id") != expected_hospital_id:
        logger.info(
            f"Rejected {field}={candidate_id}: not in hospital {expected_hospital_id}"
        )
        raise ValidationFailed(f"{field} does not belong to hospital")


def ensure_profile_in_tenant(
    store: RecordStore,
    hospital_id: UUID,
    field: str,
    profile_id: UUID | None,
) -> None:
    """Guard a link to a staff profile (assignee, counterpart, head of department)."""
    if profile_id is not None:
        ensure_same_tenant(store, "profiles", profile_id, hospital_id, field)


def ensure_references_in_tenant(
    store: RecordStore,
    hospital_id: UUID,
    *,
    department_id: UUID | None = None,
    patient_id: UUID | None = None,
    shift_id: UUID | None = None,
) -> None:
    """Guard every supplied reference; None means the link is not being set."""
    if department_id is not None:
        ensure_same_tenant(store, "departments", department_id, hospital_id, "department_id")
    if patient_id is not None:
        ensure_same_tenant(store, "patients", patient_id, hospital_id, "patient_id")
    if shift_id is not None:
        ensure_same_tenant(store, "shifts", shift_id, hospital_id, "shift_id")
