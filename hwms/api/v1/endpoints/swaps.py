# hwms/api/v1/endpoints/swaps.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hwms.core.actor_context import Actor
from hwms.core.config import get_settings
from hwms.core.errors import ValidationFailed, dependency_call
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.models.leave_request import RequestStatus
from hwms.schemas.common import DataResponse, PaginatedResponse, StatusUpdate
from hwms.schemas.swap_request import SwapRequestCreate, SwapRequestResponse
from hwms.services.authorization_service import Action, authorize
from hwms.services.lifecycle_service import SWAP_WORKFLOW, apply_transition
from hwms.services.predicates import Eq, all_of
from hwms.services.record_store import RecordStore, fetch_existing, insert_record, list_records
from hwms.services.resources import ResourceKind
from hwms.services.tenant_guard_service import ensure_profile_in_tenant
from hwms.utils.datetime_utils import utc_now

router = APIRouter()

settings = get_settings()

KIND = ResourceKind.SWAP_REQUEST


def _status_filter(value: str | None) -> Eq | None:
    if not value or value == "all":
        return None
    try:
        return Eq("status", RequestStatus(value).value)
    except ValueError:
        raise ValidationFailed("Invalid status") from None


@router.get("", response_model=PaginatedResponse[SwapRequestResponse], tags=["swaps"])
def list_swap_requests(
    hospital_id: UUID | None = None,
    status_filter: str | None = Query(None, alias="status"),
    limit: int | None = None,
    offset: int = 0,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    List swap requests, newest first, each with its shift summary.

    Query params:
    - status: pending / approved / rejected / cancelled, or "all"
    - limit: clamped to 1..swap_page_size_max (default swap_page_size_default)
    - offset: clamped to >= 0
    """
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    predicate = all_of(allow.predicate, _status_filter(status_filter))

    if limit is None:
        limit = settings.swap_page_size_default
    limit = min(settings.swap_page_size_max, max(1, limit))
    offset = max(0, offset)

    rows = list_records(store, KIND.table, predicate, KIND.label, limit=limit, offset=offset)
    with dependency_call("Swap request count failed"):
        total = store.count_rows(KIND.table, predicate)

    return {
        "data": rows,
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": total > offset + limit,
        },
    }


@router.post(
    "",
    response_model=DataResponse[SwapRequestResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["swaps"],
)
def create_swap_request(
    payload: SwapRequestCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Offer a shift for swapping. Doctors and nurses may only offer their own shifts.
    """
    shift = fetch_existing(store, ResourceKind.SHIFT.table, payload.shift_id, ResourceKind.SHIFT.label)
    allow = authorize(actor, Action.CREATE, KIND, resource=shift)
    ensure_profile_in_tenant(store, allow.hospital_id, "requested_with_user_id", payload.requested_with_user_id)

    values = {
        "shift_id": payload.shift_id,
        "requester_id": actor.id,
        "requested_with_user_id": payload.requested_with_user_id,
        "reason": payload.reason,
        "status": RequestStatus.PENDING.value,
    }
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{swap_id}", response_model=DataResponse[SwapRequestResponse], tags=["swaps"])
def get_swap_request(
    swap_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, swap_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{swap_id}", response_model=DataResponse[SwapRequestResponse], tags=["swaps"])
def transition_swap_request(
    swap_id: UUID,
    payload: StatusUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Change the status of a swap request. Approving does not reassign the shift.
    """
    row = apply_transition(store, actor, SWAP_WORKFLOW, swap_id, payload.status, utc_now())
    return {"data": row}
