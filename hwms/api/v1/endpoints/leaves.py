# hwms/api/v1/endpoints/leaves.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.models.leave_request import RequestStatus
from hwms.schemas.common import DataResponse, StatusUpdate
from hwms.schemas.leave_request import LeaveRequestCreate, LeaveRequestResponse
from hwms.services.authorization_service import Action, authorize
from hwms.services.lifecycle_service import LEAVE_WORKFLOW, apply_transition
from hwms.services.record_store import RecordStore, fetch_existing, insert_record, list_records
from hwms.services.resources import ResourceKind
from hwms.utils.datetime_utils import utc_now

router = APIRouter()

KIND = ResourceKind.LEAVE_REQUEST


@router.get("", response_model=DataResponse[list[LeaveRequestResponse]], tags=["leaves"])
def list_leave_requests(
    hospital_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    return {"data": list_records(store, KIND.table, allow.predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[LeaveRequestResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["leaves"],
)
def create_leave_request(
    payload: LeaveRequestCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    File a leave request for the caller. It starts out pending.
    """
    allow = authorize(actor, Action.CREATE, KIND)
    values = {
        "user_id": actor.id,
        "hospital_id": allow.hospital_id,
        "department_id": actor.department_id,
        "start_date": payload.start_date,
        "end_date": payload.end_date,
        "reason": payload.reason,
        "status": RequestStatus.PENDING.value,
    }
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{leave_id}", response_model=DataResponse[LeaveRequestResponse], tags=["leaves"])
def get_leave_request(
    leave_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, leave_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{leave_id}", response_model=DataResponse[LeaveRequestResponse], tags=["leaves"])
def transition_leave_request(
    leave_id: UUID,
    payload: StatusUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Change the status of a leave request.

    - owner (doctor/nurse): pending -> cancelled only
    - admin / hod / super_admin: pending -> approved | rejected | cancelled
    """
    row = apply_transition(store, actor, LEAVE_WORKFLOW, leave_id, payload.status, utc_now())
    return {"data": row}
