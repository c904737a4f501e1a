# hwms/services/authorization_service.py
"""
Authorization decision point.

``authorize(actor, action, kind, ...)`` either raises a DomainError (the deny)
or returns an ``Allow`` carrying:
- ``predicate``: the scoping predicate the record store must AND onto any
  list/count query for this kind;
- ``hospital_id``: for CREATE, the tenant the new row must be written under.

Rules are composed from the role model, the tenant scope resolver and the
relation predicate builder; there is no per-endpoint variant of these checks.

For READ / UPDATE / TRANSITION the caller passes the *stored* row as
``resource``; tenant and ownership are always taken from that row, never
from a request body.
"""

import logging
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any, Callable, Mapping
from uuid import UUID

from hwms.core.actor_context import Actor
from hwms.core.errors import Forbidden, Unauthenticated, ValidationFailed
from hwms.services.predicates import ALWAYS, Eq, Predicate, all_of
from hwms.services.relation_service import relation_predicate
from hwms.services.resources import ResourceKind, tenant_of
from hwms.services.role_service import Capability, has_capability, is_staff
from hwms.services.tenant_scope_service import (
    ensure_record_in_scope,
    resolve_scope,
    tenant_predicate,
)

logger = logging.getLogger(__name__)


class Action(str, PyEnum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    TRANSITION = "transition"


@dataclass(frozen=True)
class Allow:
    predicate: Predicate = ALWAYS
    hospital_id: UUID | None = None


Resource = Mapping[str, Any] | None


def _require(actor: Actor, capability: Capability) -> None:
    if not has_capability(actor, capability):
        logger.info(f"Profile {actor.id} ({actor.role.value}) lacks {capability.value}")
        raise Forbidden("Insufficient permissions")


def _require_resource(kind: ResourceKind, action: Action, resource: Resource) -> Mapping[str, Any]:
    if resource is None:
        raise ValueError(f"{action.value} on {kind.value} needs the stored row")
    return resource


def _list(actor: Actor, kind: ResourceKind, requested_hospital_id: UUID | None) -> Allow:
    scope = resolve_scope(actor, requested_hospital_id)
    return Allow(
        predicate=all_of(tenant_predicate(scope, kind), relation_predicate(actor, kind)),
        hospital_id=scope.hospital_id,
    )


def _read(actor: Actor, kind: ResourceKind, row: Mapping[str, Any]) -> Allow:
    """Tenant check on the stored row, then relation narrowing for staff."""
    hospital_id = tenant_of(kind, row)
    ensure_record_in_scope(actor, hospital_id)
    relation = relation_predicate(actor, kind)
    if relation is not None and not relation.matches(row):
        logger.info(f"Profile {actor.id} is not a participant of {kind.value} {row.get('id')}")
        raise Forbidden(f"{kind.label} access denied")
    return Allow(hospital_id=hospital_id)


def _write_tenant(actor: Actor, requested_hospital_id: UUID | None) -> UUID:
    """
    Tenant a new row is written under.

    Non-super actors always write into their own hospital; super_admin has no
    implicit hospital and must name one.
    """
    scope = resolve_scope(actor, requested_hospital_id)
    if scope.hospital_id is None:
        raise ValidationFailed("hospital_id is required")
    return scope.hospital_id


# ---------------------------------------------------------------------------
# Per-kind rules
# ---------------------------------------------------------------------------


def _hospital(actor, action, resource, requested_hospital_id) -> Allow:
    if action in (Action.LIST, Action.CREATE):
        _require(actor, Capability.MANAGE_HOSPITALS)
        if action is Action.LIST and requested_hospital_id is not None:
            return Allow(predicate=Eq("id", requested_hospital_id))
        return Allow()

    row = _require_resource(ResourceKind.HOSPITAL, action, resource)
    if has_capability(actor, Capability.MANAGE_HOSPITALS):
        return Allow(hospital_id=row["id"])
    _require(actor, Capability.MANAGE_OWN_HOSPITAL)
    if actor.hospital_id is None or actor.hospital_id != row["id"]:
        logger.info(f"Profile {actor.id} denied hospital {row['id']}")
        raise Forbidden("Hospital access denied")
    return Allow(hospital_id=row["id"])


def _department(actor, action, resource, requested_hospital_id) -> Allow:
    _require(actor, Capability.MANAGE_DEPARTMENTS)
    if action is Action.LIST:
        return _list(actor, ResourceKind.DEPARTMENT, requested_hospital_id)
    if action is Action.CREATE:
        return Allow(hospital_id=_write_tenant(actor, requested_hospital_id))
    row = _require_resource(ResourceKind.DEPARTMENT, action, resource)
    return _read(actor, ResourceKind.DEPARTMENT, row)


def _tenant_record(kind: ResourceKind) -> Callable[..., Allow]:
    """Rules shared by patients, tasks and handovers."""

    def rule(actor, action, resource, requested_hospital_id) -> Allow:
        if action is Action.LIST:
            return _list(actor, kind, requested_hospital_id)
        if action is Action.CREATE:
            return Allow(hospital_id=_write_tenant(actor, requested_hospital_id))
        row = _require_resource(kind, action, resource)
        return _read(actor, kind, row)

    return rule


def _shift(actor, action, resource, requested_hospital_id) -> Allow:
    if action is Action.LIST:
        return _list(actor, ResourceKind.SHIFT, requested_hospital_id)
    if action is Action.CREATE:
        _require(actor, Capability.AUTHOR_SHIFTS)
        return Allow(hospital_id=_write_tenant(actor, requested_hospital_id))
    row = _require_resource(ResourceKind.SHIFT, action, resource)
    if action is Action.UPDATE:
        _require(actor, Capability.AUTHOR_SHIFTS)
    return _read(actor, ResourceKind.SHIFT, row)


def _leave_request(actor, action, resource, requested_hospital_id) -> Allow:
    if action is Action.LIST:
        return _list(actor, ResourceKind.LEAVE_REQUEST, requested_hospital_id)
    if action is Action.CREATE:
        # requests are filed into the owner's own hospital, even for super_admin
        if actor.hospital_id is None:
            raise Forbidden("Hospital scope required")
        return Allow(hospital_id=actor.hospital_id)
    row = _require_resource(ResourceKind.LEAVE_REQUEST, action, resource)
    if action is Action.TRANSITION:
        hospital_id = tenant_of(ResourceKind.LEAVE_REQUEST, row)
        ensure_record_in_scope(actor, hospital_id)
        return Allow(hospital_id=hospital_id)
    return _read(actor, ResourceKind.LEAVE_REQUEST, row)


def _swap_request(actor, action, resource, requested_hospital_id) -> Allow:
    if action is Action.LIST:
        return _list(actor, ResourceKind.SWAP_REQUEST, requested_hospital_id)

    if action is Action.CREATE:
        # resource is the shift being offered
        shift = _require_resource(ResourceKind.SHIFT, action, resource)
        ensure_record_in_scope(actor, shift.get("hospital_id"))
        if not shift.get("is_active", True):
            raise ValidationFailed("Shift is inactive")
        if is_staff(actor) and shift.get("assigned_user_id") != actor.id:
            logger.info(f"Profile {actor.id} tried to offer shift {shift.get('id')} it does not hold")
            raise Forbidden("Only the assigned staff can request a swap")
        return Allow(hospital_id=shift.get("hospital_id"))

    row = _require_resource(ResourceKind.SWAP_REQUEST, action, resource)
    if action is Action.TRANSITION:
        hospital_id = tenant_of(ResourceKind.SWAP_REQUEST, row)
        ensure_record_in_scope(actor, hospital_id)
        return Allow(hospital_id=hospital_id)
    return _read(actor, ResourceKind.SWAP_REQUEST, row)


def _task_comment(actor, action, resource, requested_hospital_id) -> Allow:
    # resource is the parent task; comments are visible to whoever can read it
    if action not in (Action.LIST, Action.CREATE):
        raise Forbidden("Insufficient permissions")
    task = _require_resource(ResourceKind.TASK, action, resource)
    return _read(actor, ResourceKind.TASK, task)


def _profile(actor, action, resource, requested_hospital_id) -> Allow:
    # only the caller's own profile is exposed (GET /auth/me)
    row = _require_resource(ResourceKind.PROFILE, action, resource)
    if action is not Action.READ or row.get("id") != actor.id:
        raise Forbidden("Insufficient permissions")
    return Allow(hospital_id=actor.hospital_id)


_RULES: dict[ResourceKind, Callable[..., Allow]] = {
    ResourceKind.HOSPITAL: _hospital,
    ResourceKind.DEPARTMENT: _department,
    ResourceKind.PROFILE: _profile,
    ResourceKind.PATIENT: _tenant_record(ResourceKind.PATIENT),
    ResourceKind.TASK: _tenant_record(ResourceKind.TASK),
    ResourceKind.HANDOVER: _tenant_record(ResourceKind.HANDOVER),
    ResourceKind.TASK_COMMENT: _task_comment,
    ResourceKind.SHIFT: _shift,
    ResourceKind.LEAVE_REQUEST: _leave_request,
    ResourceKind.SWAP_REQUEST: _swap_request,
}


def authorize(
    actor: Actor | None,
    action: Action,
    kind: ResourceKind,
    *,
    resource: Resource = None,
    requested_hospital_id: UUID | None = None,
) -> Allow:
    """
    Decide whether ``actor`` may perform ``action`` on ``kind``.

    Pure with respect to its arguments: the same inputs always produce the
    same Allow or the same error code.
    """
    if actor is None:
        raise Unauthenticated("Authentication required")
    if not actor.is_active:
        logger.info(f"Inactive profile {actor.id} denied {action.value} on {kind.value}")
        raise Forbidden("Profile is inactive")
    return _RULES[kind](actor, action, resource, requested_hospital_id)
