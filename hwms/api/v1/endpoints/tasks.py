# hwms/api/v1/endpoints/tasks.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.models.task import TaskPriority, TaskStatus
from hwms.schemas.common import DataResponse
from hwms.schemas.task import (
    TaskCommentCreate,
    TaskCommentResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from hwms.services.authorization_service import Action, authorize
from hwms.services.predicates import Eq, all_of, equals_if_present
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

KIND = ResourceKind.TASK
COMMENTS = ResourceKind.TASK_COMMENT


@router.get("", response_model=DataResponse[list[TaskResponse]], tags=["tasks"])
def list_tasks(
    hospital_id: UUID | None = None,
    patient_id: UUID | None = None,
    assigned_to: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    List tasks. Doctors and nurses only see tasks they created or are assigned to.
    """
    allow = authorize(actor, Action.LIST, KIND, requested_hospital_id=hospital_id)
    predicate = all_of(
        allow.predicate,
        equals_if_present(patient_id=patient_id, assigned_to=assigned_to),
    )
    return {"data": list_records(store, KIND.table, predicate, KIND.label)}


@router.post(
    "",
    response_model=DataResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_task(
    payload: TaskCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    allow = authorize(actor, Action.CREATE, KIND, requested_hospital_id=payload.hospital_id)

    department_id = payload.department_id or actor.department_id
    ensure_references_in_tenant(
        store,
        allow.hospital_id,
        department_id=department_id,
        patient_id=payload.patient_id,
    )
    ensure_profile_in_tenant(store, allow.hospital_id, "assigned_to", payload.assigned_to)

    values = {
        "hospital_id": allow.hospital_id,
        "department_id": department_id,
        "patient_id": payload.patient_id,
        "created_by": actor.id,
        "assigned_to": payload.assigned_to,
        "title": payload.title,
        "description": payload.description,
        "status": (payload.status or TaskStatus.TODO).value,
        "priority": (payload.priority or TaskPriority.MEDIUM).value,
        "due_at": payload.due_at,
    }
    return {"data": insert_record(store, KIND.table, values, KIND.label)}


@router.get("/{task_id}", response_model=DataResponse[TaskResponse], tags=["tasks"])
def get_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, task_id, KIND.label)
    authorize(actor, Action.READ, KIND, resource=existing)
    return {"data": existing}


@router.put("/{task_id}", response_model=DataResponse[TaskResponse], tags=["tasks"])
def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    existing = fetch_existing(store, KIND.table, task_id, KIND.label)
    allow = authorize(actor, Action.UPDATE, KIND, resource=existing)

    changes = payload.changes()
    ensure_profile_in_tenant(store, allow.hospital_id, "assigned_to", changes.get("assigned_to"))
    for key in ("status", "priority"):
        if changes.get(key) is not None:
            changes[key] = changes[key].value

    row = apply_update(store, KIND.table, task_id, changes, KIND.label, existing)
    return {"data": row}


@router.get(
    "/{task_id}/comments",
    response_model=DataResponse[list[TaskCommentResponse]],
    tags=["tasks"],
)
def list_task_comments(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Active comments on a task, oldest first. Requires read access to the task.
    """
    task = fetch_existing(store, KIND.table, task_id, KIND.label)
    authorize(actor, Action.LIST, COMMENTS, resource=task)
    predicate = all_of(Eq("task_id", task_id), Eq("is_active", True))
    rows = list_records(store, COMMENTS.table, predicate, COMMENTS.label, order_by="created_at")
    return {"data": rows}


@router.post(
    "/{task_id}/comments",
    response_model=DataResponse[TaskCommentResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_task_comment(
    task_id: UUID,
    payload: TaskCommentCreate,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    task = fetch_existing(store, KIND.table, task_id, KIND.label)
    authorize(actor, Action.CREATE, COMMENTS, resource=task)
    values = {"task_id": task_id, "user_id": actor.id, "body": payload.body}
    return {"data": insert_record(store, COMMENTS.table, values, COMMENTS.label)}
