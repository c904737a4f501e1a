# hwms/api/v1/endpoints/patients.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.common import DataResponse
from hwms.schemas.patient import PatientCreate, PatientResponse, PatientUpdate
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
from hwms.services.tenant_guard_service import ensure_references_in_tenant

router = APIRouter()

KIND = ResourceKind.PATIENT


@router.get("", response_model=DataResponse[list[PatientResponse]], tags=["patients"])
def list_patients(
    hospital_id: UUID | None = None,
    department_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    List patients in the caller's hospital (any hospital for super_admin).

    Optional filters:
    - hospital_id (must match the caller's own unless super_admin)
    - department_id
    """
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    predicate = all_of(allow.predicate, equals_if_present(department_id=department_id))
    return {"data": list_records(store, KIND.table, predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[PatientResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["patients"],
)
def create_patient(
    payload: PatientCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.CREATE, KIND, requested_hospital_id=payload.hospital_id)
    ensure_references_in_tenant(store, allow.hospital_id, department_id=payload.department_id)

    values = payload.model_dump()
    values["hospital_id"] = allow.hospital_id
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{patient_id}", response_model=DataResponse[PatientResponse], tags=["patients"])
def get_patient(
    patient_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, patient_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{patient_id}", response_model=DataResponse[PatientResponse], tags=["patients"])
def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, patient_id, KIND.label)
    allow = authorize(actor, Action.UPDATE, KIND, resource=existing)

    changes = payload.changes()
    ensure_references_in_tenant(store, allow.hospital_id, department_id=changes.get("department_id"))

    row = apply_update(store, KIND.table, patient_id, changes, KIND.label, existing)
    return {"data": row}
