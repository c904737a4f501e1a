# hwms/services/analytics_service.py
import logging
from typing import Any
from uuid import UUID

from hwms.core.actor_context import Actor
from hwms.core.errors import DependencyFailure, StoreError
from hwms.models.task import TaskPriority, TaskStatus
from hwms.services.authorization_service import Action, authorize
from hwms.services.predicates import Eq, all_of
from hwms.services.record_store import RecordStore
from hwms.services.resources import ResourceKind
from hwms.services.tenant_scope_service import resolve_scope

logger = logging.getLogger(__name__)

# response key -> counted kind
COUNTED_KINDS: dict[str, ResourceKind] = {
    "patients": ResourceKind.PATIENT,
    "shifts": ResourceKind.SHIFT,
    "leave_requests": ResourceKind.LEAVE_REQUEST,
    "tasks": ResourceKind.TASK,
    "swap_requests": ResourceKind.SWAP_REQUEST,
    "handovers": ResourceKind.HANDOVER,
}

ACTIVE = Eq("is_active", True)


def summarize(
    store: RecordStore,
    actor: Actor | None,
    requested_hospital_id: UUID | None = None,
) -> dict[str, Any]:
    """
    Counts of active records the actor could list, plus task breakdowns.

    Each count uses the same predicate as the matching list endpoint. If any
    single count fails the whole summary fails; no partial result is returned.
    """
    predicates = {
        key: all_of(
            authorize(actor, Action.LIST, kind, requested_hospital_id=requested_hospital_id).predicate,
            ACTIVE,
        )
        for key, kind in COUNTED_KINDS.items()
    }
    scope = resolve_scope(actor, requested_hospital_id)

    try:
        counts = {
            key: store.count_rows(COUNTED_KINDS[key].table, predicate)
            for key, predicate in predicates.items()
        }
        task_predicate = predicates["tasks"]
        by_status = {
            status.value: store.count_rows(
                ResourceKind.TASK.table, all_of(task_predicate, Eq("status", status.value))
            )
            for status in TaskStatus
        }
        by_priority = {
            priority.value: store.count_rows(
                ResourceKind.TASK.table, all_of(task_predicate, Eq("priority", priority.value))
            )
            for priority in TaskPriority
        }
    except StoreError as exc:
        logger.error(f"Analytics summary failed for profile {actor.id}: {exc}", exc_info=True)
        raise DependencyFailure(f"Analytics summary failed: {exc}") from exc

    return {
        "scope": {
            "hospital_id": scope.hospital_id,
            "role": actor.role.value,
        },
        "counts": counts,
        "tasks": {
            "by_status": by_status,
            "by_priority": by_priority,
        },
    }


def summary_cache_key(actor: Actor | None, requested_hospital_id: UUID | None = None) -> str:
    """
    Cache key for an actor's summary.

    Authorizes first, so a cached summary is never served to a caller who
    could not compute it.
    """
    allow = authorize(actor, Action.LIST, ResourceKind.PATIENT, requested_hospital_id=requested_hospital_id)
    scope = allow.hospital_id or "all"
    return f"analytics:summary:{actor.id}:{actor.role.value}:{scope}"
