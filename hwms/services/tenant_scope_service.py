# hwms/services/tenant_scope_service.py
"""
Tenant scope resolution.

Every list, read and write goes through ``resolve_scope``; there is no other
code path that decides which hospital a request is restricted to.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from hwms.core.actor_context import Actor
from hwms.core.errors import Forbidden
from hwms.services.predicates import ALWAYS, Eq, Predicate
from hwms.services.resources import ResourceKind, tenant_column
from hwms.services.role_service import Capability, has_capability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantFilter:
    """``hospital_id=None`` means unrestricted (super_admin only)."""

    hospital_id: UUID | None = None

    @property
    def unrestricted(self) -> bool:
        return self.hospital_id is None


def resolve_scope(actor: Actor, requested_hospital_id: UUID | None = None) -> TenantFilter:
    if has_capability(actor, Capability.CROSS_TENANT):
        return TenantFilter(requested_hospital_id)

    if actor.hospital_id is None:
        logger.info(f"Profile {actor.id} ({actor.role.value}) has no hospital scope")
        raise Forbidden("Hospital scope required")

    if requested_hospital_id is not None and requested_hospital_id != actor.hospital_id:
        logger.info(
            f"Profile {actor.id} asked for hospital {requested_hospital_id} "
            f"outside its own {actor.hospital_id}"
        )
        raise Forbidden("Hospital access denied")

    return TenantFilter(actor.hospital_id)


def ensure_record_in_scope(actor: Actor, record_hospital_id: UUID | None) -> None:
    """
    Check a stored row's tenant against the actor.

    Wrong-tenant rows are reported as FORBIDDEN, never NOT_FOUND.
    """
    scope = resolve_scope(actor)
    if scope.unrestricted:
        return
    if record_hospital_id != scope.hospital_id:
        logger.info(
            f"Profile {actor.id} denied access to a record of hospital {record_hospital_id}"
        )
        raise Forbidden("Hospital access denied")


def tenant_predicate(scope: TenantFilter, kind: ResourceKind) -> Predicate:
    if scope.unrestricted:
        return ALWAYS
    return Eq(tenant_column(kind), scope.hospital_id)
