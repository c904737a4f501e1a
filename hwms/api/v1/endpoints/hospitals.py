# hwms/api/v1/endpoints/hospitals.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.core.errors import ValidationFailed, dependency_call
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.common import DataResponse
from hwms.schemas.hospital import HospitalCreate, HospitalResponse, HospitalUpdate
from hwms.services.authorization_service import Action, authorize
from hwms.services.predicates import Eq
from hwms.services.record_store import (
    RecordStore,
    apply_update,
    fetch_existing,
    insert_record,
    list_records,
)
from hwms.services.resources import ResourceKind

router = APIRouter()

KIND = ResourceKind.HOSPITAL


def _ensure_code_free(store: RecordStore, code: str, hospital_id: UUID | None = None) -> None:
    with dependency_call("Hospital lookup failed"):
        clashes = store.query_rows(KIND.table, Eq("code", code), limit=2)
    if any(row["id"] != hospital_id for row in clashes):
        raise ValidationFailed("Hospital code already exists")


@router.get("", response_model=DataResponse[list[HospitalResponse]], tags=["hospitals"])
def list_hospitals(
    hospital_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    List hospitals, active and inactive. super_admin only.
    """
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    return {"data": list_records(store, KIND.table, allow.predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[HospitalResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["hospitals"],
)
def create_hospital(
    payload: HospitalCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    authorize(actor, Action.CREATE, KIND)
    _ensure_code_free(store, payload.code)
    row = insert_record(store, KIND.table, payload.model_dump(), KIND.label)
    return {"data": row}


@router.get("/{hospital_id}", response_model=DataResponse[HospitalResponse], tags=["hospitals"])
def get_hospital(
    hospital_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    # decided on the id alone, before the fetch
    authorize(actor, Action.READ, KIND, resource={"id": hospital_id})
    return {"data": fetch_existing(store, KIND.table, hospital_id, KIND.label)}


@router.put("/{hospital_id}", response_model=DataResponse[HospitalResponse], tags=["hospitals"])
def update_hospital(
    hospital_id: UUID,
    payload: HospitalUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    authorize(actor, Action.UPDATE, KIND, resource={"id": hospital_id})
    existing = fetch_existing(store, KIND.table, hospital_id, KIND.label)
    changes = payload.changes()
    if changes.get("code"):
        _ensure_code_free(store, changes["code"], hospital_id)
    row = apply_update(store, KIND.table, hospital_id, changes, KIND.label, existing)
    return {"data": row}
