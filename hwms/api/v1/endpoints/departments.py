# hwms/api/v1/endpoints/departments.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.common import DataResponse
from hwms.schemas.department import DepartmentCreate, DepartmentResponse, DepartmentUpdate
from hwms.services.authorization_service import Action, authorize
from hwms.services.record_store import (
    RecordStore,
    apply_update,
    fetch_existing,
    insert_record,
    list_records,
)
from hwms.services.resources import ResourceKind
from hwms.services.tenant_guard_service import ensure_profile_in_tenant

router = APIRouter()

KIND = ResourceKind.DEPARTMENT


@router.get("", response_model=DataResponse[list[DepartmentResponse]], tags=["departments"])
def list_departments(
    hospital_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    return {"data": list_records(store, KIND.table, allow.predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[DepartmentResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["departments"],
)
def create_department(
    payload: DepartmentCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.CREATE, KIND, requested_hospital_id=payload.hospital_id)
    ensure_profile_in_tenant(store, allow.hospital_id, "hod_user_id", payload.hod_user_id)

    values = payload.model_dump()
    values["hospital_id"] = allow.hospital_id
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{department_id}", response_model=DataResponse[DepartmentResponse], tags=["departments"])
def get_department(
    department_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, department_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{department_id}", response_model=DataResponse[DepartmentResponse], tags=["departments"])
def update_department(
    department_id: UUID,
    payload: DepartmentUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Update a department. hospital_id is immutable and cannot appear in the body.
    """
    existing = fetch_existing(store, KIND.table, department_id, KIND.label)
    allow = authorize(actor, Action.UPDATE, KIND, resource=existing)

    changes = payload.changes()
    ensure_profile_in_tenant(store, allow.hospital_id, "hod_user_id", changes.get("hod_user_id"))

    row = apply_update(store, KIND.table, department_id, changes, KIND.label, existing)
    return {"data": row}
