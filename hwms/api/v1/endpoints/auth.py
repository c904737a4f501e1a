# hwms/api/v1/endpoints/auth.py
from typing import Any

from fastapi import APIRouter, Depends

from hwms.core.actor_context import Actor
from hwms.dependencies.identity import get_current_actor, get_current_profile
from hwms.schemas.common import DataResponse
from hwms.schemas.profile import MeResponse
from hwms.services.authorization_service import Action, authorize
from hwms.services.resources import ResourceKind

router = APIRouter()


@router.get("/me", response_model=DataResponse[MeResponse], tags=["auth"])
def read_current_profile(
    profile: dict[str, Any] = Depends(get_current_profile),
    actor: Actor = Depends(get_current_actor),
) -> dict:
    """
    Return the authenticated identity and its profile.
    """
    authorize(actor, Action.READ, ResourceKind.PROFILE, resource=profile)
    return {
        "data": {
            "user": {"id": actor.id, "email": actor.email},
            "profile": profile,
        }
    }
