# hwms/services/relation_service.py
from hwms.core.actor_context import Actor
from hwms.services.predicates import Eq, Predicate, any_of
from hwms.services.resources import ResourceKind
from hwms.services.role_service import is_staff

# Participant columns per kind. Kinds not listed are visible to the whole tenant.
RELATION_COLUMNS: dict[ResourceKind, tuple[str, ...]] = {
    ResourceKind.TASK: ("created_by", "assigned_to"),
    ResourceKind.LEAVE_REQUEST: ("user_id",),
    ResourceKind.SWAP_REQUEST: ("requester_id", "requested_with_user_id"),
    ResourceKind.HANDOVER: ("from_user_id", "to_user_id"),
    ResourceKind.SHIFT: ("assigned_user_id",),
}


def relation_predicate(actor: Actor, kind: ResourceKind) -> Predicate | None:
    """
    Narrow staff (doctor/nurse) to rows naming them as a participant.

    Returns None when no narrowing applies: non-staff actors, or kinds with no
    participant columns (patients, departments, hospitals).
    """
    if not is_staff(actor):
        return None
    columns = RELATION_COLUMNS.get(kind)
    if not columns:
        return None
    return any_of(*(Eq(column, actor.id) for column in columns))
