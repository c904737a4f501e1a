# hwms/services/role_service.py
"""
Static role model.

Roles are not ordered; each one maps to a fixed capability set. Call sites ask
for a capability ("can this actor review requests?") instead of comparing role
strings, so adding a role means editing one table.
"""

from enum import Enum as PyEnum

from hwms.core.actor_context import Actor
from hwms.models.profile import UserRole


class Capability(str, PyEnum):
    CROSS_TENANT = "cross_tenant"
    MANAGE_HOSPITALS = "manage_hospitals"
    MANAGE_OWN_HOSPITAL = "manage_own_hospital"
    MANAGE_DEPARTMENTS = "manage_departments"
    AUTHOR_SHIFTS = "author_shifts"
    REVIEW_REQUESTS = "review_requests"
    RELATION_NARROWED = "relation_narrowed"


ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.SUPER_ADMIN: frozenset(
        {
            Capability.CROSS_TENANT,
            Capability.MANAGE_HOSPITALS,
            Capability.MANAGE_OWN_HOSPITAL,
            Capability.MANAGE_DEPARTMENTS,
            Capability.AUTHOR_SHIFTS,
            Capability.REVIEW_REQUESTS,
        }
    ),
    UserRole.ADMIN: frozenset(
        {
            Capability.MANAGE_OWN_HOSPITAL,
            Capability.MANAGE_DEPARTMENTS,
            Capability.AUTHOR_SHIFTS,
            Capability.REVIEW_REQUESTS,
        }
    ),
    UserRole.HOD: frozenset(
        {
            Capability.MANAGE_DEPARTMENTS,
            Capability.AUTHOR_SHIFTS,
            Capability.REVIEW_REQUESTS,
        }
    ),
    UserRole.DOCTOR: frozenset({Capability.RELATION_NARROWED}),
    UserRole.NURSE: frozenset({Capability.RELATION_NARROWED}),
}


def roles_with(capability: Capability) -> frozenset[UserRole]:
    return frozenset(role for role, caps in ROLE_CAPABILITIES.items() if capability in caps)


STAFF_ROLES = roles_with(Capability.RELATION_NARROWED)
REVIEWER_ROLES = roles_with(Capability.REVIEW_REQUESTS)


def capabilities_of(actor: Actor) -> frozenset[Capability]:
    """Deactivated profiles have no capability at all."""
    if not actor.is_active:
        return frozenset()
    return ROLE_CAPABILITIES.get(actor.role, frozenset())


def has_capability(actor: Actor, capability: Capability) -> bool:
    return capability in capabilities_of(actor)


def is_staff(actor: Actor) -> bool:
    """Doctor or nurse: visibility narrowed to rows the actor takes part in."""
    return actor.role in STAFF_ROLES


def is_reviewer(actor: Actor) -> bool:
    return has_capability(actor, Capability.REVIEW_REQUESTS)
