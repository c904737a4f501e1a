# hwms/dependencies/identity.py
from typing import Any
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hwms.core.actor_context import Actor
from hwms.core.database import get_db
from hwms.core.errors import Unauthenticated, dependency_call
from hwms.core.security import decode_token
from hwms.services.record_store import RecordStore, SqlAlchemyRecordStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlAlchemyRecordStore(db)


def get_current_profile(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: RecordStore = Depends(get_record_store),
) -> dict[str, Any]:
    """
    Resolve the bearer token to the caller's profile row.

    The token only proves identity; role and hospital always come from the
    stored profile.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authentication required")

    try:
        payload = decode_token(credentials.credentials)
    except ValueError as exc:
        raise Unauthenticated(str(exc)) from exc

    try:
        profile_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthenticated("Invalid token payload") from None

    with dependency_call("Profile lookup failed"):
        profile = store.fetch_row("profiles", profile_id)

    if profile is None:
        raise Unauthenticated("Authentication required")
    return profile


def get_current_actor(profile: dict[str, Any] = Depends(get_current_profile)) -> Actor:
    return Actor.from_profile(profile)
