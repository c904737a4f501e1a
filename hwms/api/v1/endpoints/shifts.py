# hwms/api/v1/endpoints/shifts.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.core.errors import ValidationFailed
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.common import DataResponse
from hwms.schemas.shift import ShiftCreate, ShiftResponse, ShiftUpdate, ensure_shift_window
from hwms.services.authorization_service import Action, authorize
from hwms.services.predicates import all_of, equals_if_present
from hwms.services.record_store import (
    RecordStore,
    apply_update,
    fetch_existing,
    insert_record,
    list_records,
)
from hwms.services.resources import ResourceKind
from hwms.services.tenant_guard_service import ensure_profile_in_tenant, ensure_references_in_tenant

router = APIRouter()

KIND = ResourceKind.SHIFT


@router.get("", response_model=DataResponse[list[ShiftResponse]], tags=["shifts"])
def list_shifts(
    hospital_id: UUID | None = None,
    department_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    List shifts by start time. Doctors and nurses only see their own shifts.
    """
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    predicate = all_of(allow.predicate, equals_if_present(department_id=department_id))
    return {"data": list_records(store, KIND.table, predicate, KIND.label, order_by="start_at")}


@router.post(
    "",
    response_model=DataResponse[ShiftResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["shifts"],
)
def create_shift(
    payload: ShiftCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.CREATE, KIND, requested_hospital_id=payload.hospital_id)
    ensure_references_in_tenant(store, allow.hospital_id, department_id=payload.department_id)
    ensure_profile_in_tenant(store, allow.hospital_id, "assigned_user_id", payload.assigned_user_id)

    values = payload.model_dump()
    values["hospital_id"] = allow.hospital_id
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{shift_id}", response_model=DataResponse[ShiftResponse], tags=["shifts"])
def get_shift(
    shift_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, shift_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{shift_id}", response_model=DataResponse[ShiftResponse], tags=["shifts"])
def update_shift(
    shift_id: UUID,
    payload: ShiftUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, shift_id, KIND.label)
    allow = authorize(actor, Action.UPDATE, KIND, resource=existing)

    changes = payload.changes()
    try:
        ensure_shift_window(
            changes.get("start_at", existing.get("start_at")),
            changes.get("end_at", existing.get("end_at")),
        )
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc

    ensure_references_in_tenant(store, allow.hospital_id, department_id=changes.get("department_id"))
    ensure_profile_in_tenant(store, allow.hospital_id, "assigned_user_id", changes.get("assigned_user_id"))

    row = apply_update(store, KIND.table, shift_id, changes, KIND.label, existing)
    return {"data": row}
