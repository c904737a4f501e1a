# hwms/services/lifecycle_service.py
"""
Approval workflow shared by leave requests and shift swap requests.

    pending -> approved | rejected | cancelled

All three targets are terminal. ``plan_transition`` is a pure function of
(actor, stored row, requested status, clock reading) and returns the patch to
write. ``apply_transition`` writes it conditionally on ``status == pending``
so a concurrent reviewer cannot overwrite a decision already taken.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from hwms.core.actor_context import Actor
from hwms.core.errors import ConflictError, Forbidden, NotFound, ValidationFailed, dependency_call
from hwms.models.leave_request import RequestStatus
from hwms.services.authorization_service import Action, authorize
from hwms.services.record_store import RecordStore, Row, fetch_existing
from hwms.services.resources import ResourceKind
from hwms.services.role_service import is_reviewer, is_staff

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.CANCELLED})

PENDING_PRECONDITION = {"status": RequestStatus.PENDING.value}


@dataclass(frozen=True)
class Workflow:
    kind: ResourceKind
    owner_column: str
    owner_denied_message: str

    @property
    def table(self) -> str:
        return self.kind.table

    @property
    def label(self) -> str:
        return self.kind.label


LEAVE_WORKFLOW = Workflow(
    kind=ResourceKind.LEAVE_REQUEST,
    owner_column="user_id",
    owner_denied_message="Leave access denied",
)

SWAP_WORKFLOW = Workflow(
    kind=ResourceKind.SWAP_REQUEST,
    owner_column="requester_id",
    owner_denied_message="Only the requester can update this swap",
)


@dataclass(frozen=True)
class Transition:
    status: RequestStatus
    reviewed_by: UUID | None
    reviewed_at: datetime | None

    def as_patch(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at,
        }


def _parse_status(value: Any) -> RequestStatus | None:
    if value is None or value == "":
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationFailed("Invalid status") from None


def plan_transition(
    actor: Actor,
    workflow: Workflow,
    record: Mapping[str, Any],
    requested_status: Any,
    now: datetime,
) -> Transition:
    """
    Decide the status change ``actor`` may apply to ``record``.

    Staff may only cancel their own pending request; the review stamp is
    cleared. Reviewers may approve, reject or cancel a pending request; the
    review stamp is set to (actor, now).
    """
    target = _parse_status(requested_status)
    if target is None:
        raise ValidationFailed("Missing status")
    if not actor.is_active:
        raise Forbidden("Profile is inactive")

    current = _parse_status(record.get("status"))

    if is_staff(actor):
        if record.get(workflow.owner_column) != actor.id:
            logger.info(f"Profile {actor.id} does not own {workflow.kind.value} {record.get('id')}")
            raise Forbidden(workflow.owner_denied_message)
        if target is not RequestStatus.CANCELLED:
            raise Forbidden("Only cancellation is allowed")
        if current is not RequestStatus.PENDING:
            raise ValidationFailed("Only pending requests can be cancelled")
        return Transition(status=RequestStatus.CANCELLED, reviewed_by=None, reviewed_at=None)

    if not is_reviewer(actor):
        raise Forbidden("Insufficient permissions")
    if current is not RequestStatus.PENDING:
        raise ValidationFailed("Only pending requests can be reviewed")
    if target not in REVIEW_OUTCOMES:
        raise ValidationFailed("Invalid status")
    return Transition(status=target, reviewed_by=actor.id, reviewed_at=now)


def apply_transition(
    store: RecordStore,
    actor: Actor,
    workflow: Workflow,
    record_id: UUID,
    requested_status: Any,
    now: datetime,
) -> Row:
    """Fetch, authorize, plan and conditionally write one status change."""
    existing = fetch_existing(store, workflow.table, record_id, workflow.label)
    authorize(actor, Action.TRANSITION, workflow.kind, resource=existing)
    transition = plan_transition(actor, workflow, existing, requested_status, now)

    try:
        with dependency_call(f"{workflow.label} update failed"):
            row = store.write_row(
                workflow.table,
                record_id,
                transition.as_patch(),
                precondition=PENDING_PRECONDITION,
            )
    except ConflictError as exc:
        logger.info(f"{workflow.label} {record_id} transition lost a race: {exc}")
        raise ValidationFailed(f"{workflow.label} is no longer pending", status_code=409) from exc

    if row is None:
        raise NotFound(f"{workflow.label} not found")

    logger.info(
        f"{workflow.label} {record_id} -> {transition.status.value} by profile {actor.id} ({actor.role.value})"
    )
    return row
