# hwms/api/v1/endpoints/handovers.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.common import DataResponse
from hwms.schemas.handover import HandoverCreate, HandoverResponse, HandoverUpdate
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

KIND = ResourceKind.HANDOVER


@router.get("", response_model=DataResponse[list[HandoverResponse]], tags=["handovers"])
def list_handovers(
    hospital_id: UUID | None = None,
    department_id: UUID | None = None,
    patient_id: UUID | None = None,
    shift_id: UUID | None = None,
    from_user_id: UUID | None = None,
    to_user_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    predicate = all_of(
        allow.predicate,
        equals_if_present(
            department_id=department_id,
            patient_id=patient_id,
            shift_id=shift_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
        ),
    )
    return {"data": list_records(store, KIND.table, predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[HandoverResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["handovers"],
)
def create_handover(
    payload: HandoverCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Record a handover from the caller. Department defaults to the caller's own.
    """
    allow = authorize(actor, Action.CREATE, KIND, requested_hospital_id=payload.hospital_id)

    department_id = payload.department_id or actor.department_id
    ensure_references_in_tenant(
        store,
        allow.hospital_id,
        department_id=department_id,
        patient_id=payload.patient_id,
        shift_id=payload.shift_id,
    )
    ensure_profile_in_tenant(store, allow.hospital_id, "to_user_id", payload.to_user_id)

    values = {
        "hospital_id": allow.hospital_id,
        "department_id": department_id,
        "patient_id": payload.patient_id,
        "shift_id": payload.shift_id,
        "from_user_id": actor.id,
        "to_user_id": payload.to_user_id,
        "notes": payload.notes,
    }
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{handover_id}", response_model=DataResponse[HandoverResponse], tags=["handovers"])
def get_handover(
    handover_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, handover_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{handover_id}", response_model=DataResponse[HandoverResponse], tags=["handovers"])
def update_handover(
    handover_id: UUID,
    payload: HandoverUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Update a handover. New links are checked against the stored row's hospital.
    """
    existing = fetch_existing(store, KIND.table, handover_id, KIND.label)
    allow = authorize(actor, Action.UPDATE, KIND, resource=existing)

    changes = payload.changes()
    ensure_references_in_tenant(
        store,
        allow.hospital_id,
        department_id=changes.get("department_id"),
        patient_id=changes.get("patient_id"),
        shift_id=changes.get("shift_id"),
    )
    ensure_profile_in_tenant(store, allow.hospital_id, "to_user_id", changes.get("to_user_id"))

    row = apply_update(store, KIND.table, handover_id, changes, KIND.label, existing)
    return {"data": row}
