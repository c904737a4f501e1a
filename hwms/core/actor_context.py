# hwms/core/actor_context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from hwms.models.profile import UserRole


@dataclass(frozen=True)
class Actor:
    """
    The authenticated caller, as seen by the authorization engine.

    Built from a profile row; never from request bodies.
    """

    id: UUID
    role: UserRole
    hospital_id: UUID | None = None
    department_id: UUID | None = None
    is_active: bool = True
    email: str | None = None
    full_name: str | None = None

    @classmethod
    def from_profile(cls, profile: Mapping[str, Any]) -> Actor:
        role = UserRole(profile["role"])
        return cls(
            id=profile["id"],
            role=role,
            # super_admin is never tenant-bound, whatever the row says
            hospital_id=None if role is UserRole.SUPER_ADMIN else profile.get("hospital_id"),
            department_id=profile.get("department_id"),
            is_active=bool(profile.get("is_active", True)),
            email=profile.get("email"),
            full_name=profile.get("full_name"),
        )
