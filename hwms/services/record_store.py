# hwms/services/record_store.py
"""
Record store: the only place that talks to the database.

The authorization engine hands this module a table name and a predicate
(``hwms.services.predicates``); the store turns that into SQL and returns
plain dict rows. Every SQLAlchemy failure is rolled back and re-raised as
``StoreError`` so the core can report it as DEPENDENCY_ERROR.

Swap requests are always read joined to their shift and carry a
``"shift"`` sub-mapping (hospital_id, start_at, end_at, assigned_user_id),
which is where their tenant lives.
"""

import logging
from typing import Any, Mapping, Protocol
from uuid import UUID

from sqlalchemy import and_, false, func, or_, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hwms.core.errors import ConflictError, NotFound, StoreError, dependency_call
from hwms.models.base import Base
from hwms.models.department import Department
from hwms.models.handover import Handover
from hwms.models.hospital import Hospital
from hwms.models.leave_request import LeaveRequest
from hwms.models.patient import Patient
from hwms.models.profile import Profile
from hwms.models.shift import Shift
from hwms.models.swap_request import SwapRequest
from hwms.models.task import Task, TaskComment
from hwms.services.predicates import AllOf, AnyOf, Eq, Predicate

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class RecordStore(Protocol):
    def fetch_row(self, table: str, row_id: UUID) -> Row | None: ...

    def query_rows(
        self,
        table: str,
        predicate: Predicate,
        order_by: str = "-created_at",
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Row]: ...

    def count_rows(self, table: str, predicate: Predicate) -> int: ...

    def insert_row(self, table: str, values: Mapping[str, Any]) -> Row: ...

    def write_row(
        self,
        table: str,
        row_id: UUID,
        patch: Mapping[str, Any],
        precondition: Mapping[str, Any] | None = None,
    ) -> Row | None: ...


MODELS: dict[str, type[Base]] = {
    "hospitals": Hospital,
    "departments": Department,
    "profiles": Profile,
    "patients": Patient,
    "tasks": Task,
    "task_comments": TaskComment,
    "shifts": Shift,
    "leave_requests": LeaveRequest,
    "swap_requests": SwapRequest,
    "handovers": Handover,
}

SHIFT_SUMMARY_COLUMNS = ("hospital_id", "start_at", "end_at", "assigned_user_id")


def _model_for(table: str) -> type[Base]:
    try:
        return MODELS[table]
    except KeyError:
        raise StoreError(f"Unknown table '{table}'") from None


def _column(table: str, name: str):
    model = _model_for(table)
    if "." in name:
        relation, _, attr = name.partition(".")
        if table == "swap_requests" and relation == "shift":
            return getattr(Shift, attr)
        raise StoreError(f"Cannot resolve '{name}' on table '{table}'")
    try:
        return getattr(model, name)
    except AttributeError:
        raise StoreError(f"Unknown column '{name}' on table '{table}'") from None


def compile_predicate(table: str, predicate: Predicate):
    """Translate a predicate tree into a SQLAlchemy boolean clause."""
    if isinstance(predicate, Eq):
        return _column(table, predicate.column) == predicate.value
    if isinstance(predicate, AnyOf):
        if not predicate.clauses:
            return false()
        return or_(*(compile_predicate(table, clause) for clause in predicate.clauses))
    if isinstance(predicate, AllOf):
        if not predicate.clauses:
            return true()
        return and_(*(compile_predicate(table, clause) for clause in predicate.clauses))
    raise StoreError(f"Unsupported predicate {predicate!r}")


def _to_row(obj: Base) -> Row:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


class SqlAlchemyRecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _select(self, table: str):
        model = _model_for(table)
        if table == "swap_requests":
            return select(SwapRequest, Shift).join(Shift, SwapRequest.shift_id == Shift.id)
        return select(model)

    def _materialize(self, table: str, result) -> Row:
        if table == "swap_requests":
            swap, shift = result
            row = _to_row(swap)
            row["shift"] = {name: getattr(shift, name) for name in SHIFT_SUMMARY_COLUMNS}
            return row
        return _to_row(result[0])

    def _order(self, table: str, order_by: str):
        descending = order_by.startswith("-")
        column = _column(table, order_by.lstrip("-"))
        return column.desc() if descending else column.asc()

    def fetch_row(self, table: str, row_id: UUID) -> Row | None:
        model = _model_for(table)
        try:
            stmt = self._select(table).where(model.id == row_id)
            result = self.db.execute(stmt).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to fetch {table} {row_id}: {exc}") from exc
        if result is None:
            return None
        return self._materialize(table, result)

    def query_rows(
        self,
        table: str,
        predicate: Predicate,
        order_by: str = "-created_at",
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Row]:
        stmt = (
            self._select(table)
            .where(compile_predicate(table, predicate))
            .order_by(self._order(table, order_by))
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        try:
            results = self.db.execute(stmt).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to query {table}: {exc}") from exc
        return [self._materialize(table, result) for result in results]

    def count_rows(self, table: str, predicate: Predicate) -> int:
        model = _model_for(table)
        stmt = select(func.count()).select_from(model)
        if table == "swap_requests":
            stmt = stmt.join(Shift, SwapRequest.shift_id == Shift.id)
        stmt = stmt.where(compile_predicate(table, predicate))
        try:
            return int(self.db.execute(stmt).scalar_one())
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to count {table}: {exc}") from exc

    def insert_row(self, table: str, values: Mapping[str, Any]) -> Row:
        model = _model_for(table)
        obj = model(**values)
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to insert into {table}: {exc}") from exc
        if table == "swap_requests":
            return self.fetch_row(table, obj.id)
        return _to_row(obj)

    def write_row(
        self,
        table: str,
        row_id: UUID,
        patch: Mapping[str, Any],
        precondition: Mapping[str, Any] | None = None,
    ) -> Row | None:
        """
        Conditional update.

        Returns None if the row does not exist, raises ConflictError if it
        exists but ``precondition`` no longer holds.
        """
        model = _model_for(table)
        clauses = [model.id == row_id]
        for name, value in (precondition or {}).items():
            clauses.append(getattr(model, name) == value)

        stmt = (
            update(model)
            .where(*clauses)
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
            else:
                self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to update {table} {row_id}: {exc}") from exc

        if result.rowcount == 0:
            if self.fetch_row(table, row_id) is None:
                return None
            logger.info(f"Conditional update on {table} {row_id} lost: {dict(precondition or {})}")
            raise ConflictError(f"{table} {row_id} changed concurrently")

        return self.fetch_row(table, row_id)


def fetch_existing(store: RecordStore, table: str, row_id: UUID, label: str) -> Row:
    with dependency_call(f"{label} lookup failed"):
        row = store.fetch_row(table, row_id)
    if row is None:
        raise NotFound(f"{label} not found")
    return row


def apply_update(
    store: RecordStore,
    table: str,
    row_id: UUID,
    changes: Mapping[str, Any],
    label: str,
    existing: Row | None = None,
) -> Row:
    """Write ``changes`` to an existing row; an empty patch returns the row untouched."""
    if not changes and existing is not None:
        return existing
    with dependency_call(f"{label} update failed"):
        row = store.write_row(table, row_id, dict(changes))
    if row is None:
        raise NotFound(f"{label} not found")
    return row


def insert_record(store: RecordStore, table: str, values: Mapping[str, Any], label: str) -> Row:
    with dependency_call(f"{label} create failed"):
        return store.insert_row(table, dict(values))


def list_records(
    store: RecordStore,
    table: str,
    predicate: Predicate,
    label: str,
    order_by: str = "-created_at",
    limit: int | None = None,
    offset: int | None = None,
) -> list[Row]:
    with dependency_call(f"{label} list failed"):
        return store.query_rows(table, predicate, order_by=order_by, limit=limit, offset=offset)
