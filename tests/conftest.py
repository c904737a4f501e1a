"""
Shared fixtures.

The API is exercised against an in-memory record store instead of a
database; the store evaluates the same predicates the SQL adapter compiles.
"""

import os

# hwms.core.database builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.pop("REDIS_URL", None)

import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from hwms.core.actor_context import Actor
from hwms.core.errors import ConflictError, StoreError
from hwms.core.security import create_access_token
from hwms.dependencies.identity import get_record_store
from hwms.main import app
from hwms.services.predicates import lookup


# -----------------------
# Fake record store
# -----------------------

_BASE_TIME = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


class FakeRecordStore:
    """Dict-backed record store with the same contract as SqlAlchemyRecordStore."""

    def __init__(self):
        self.tables: dict[str, dict[uuid.UUID, dict]] = {}
        self.fail_on: set[str] = set()
        self.conflict_on_write = False
        self.writes: list[tuple] = []
        self.count_calls: list[tuple] = []
        self._tick = 0

    # helpers for tests ---------------------------------------------------

    def _now(self) -> datetime:
        self._tick += 1
        return _BASE_TIME + timedelta(seconds=self._tick)

    def add(self, table: str, **values) -> dict:
        now = self._now()
        row = {"id": uuid.uuid4(), "is_active": True, "created_at": now, "updated_at": now}
        row.update(values)
        self.tables.setdefault(table, {})[row["id"]] = row
        return row

    def _check(self, table: str) -> None:
        if table in self.fail_on:
            raise StoreError(f"{table} unavailable")

    def _materialize(self, table: str, row: dict) -> dict:
        out = copy.deepcopy(row)
        if table == "swap_requests":
            shift = self.tables.get("shifts", {}).get(row["shift_id"])
            out["shift"] = None if shift is None else {
                "hospital_id": shift["hospital_id"],
                "start_at": shift["start_at"],
                "end_at": shift["end_at"],
                "assigned_user_id": shift.get("assigned_user_id"),
            }
        return out

    def _rows(self, table: str) -> list[dict]:
        rows = [self._materialize(table, row) for row in self.tables.get(table, {}).values()]
        if table == "swap_requests":
            # inner join on shifts
            rows = [row for row in rows if row["shift"] is not None]
        return rows

    # record store contract -----------------------------------------------

    def fetch_row(self, table, row_id):
        self._check(table)
        row = self.tables.get(table, {}).get(row_id)
        if row is None:
            return None
        materialized = self._materialize(table, row)
        if table == "swap_requests" and materialized["shift"] is None:
            return None
        return materialized

    def query_rows(self, table, predicate, order_by="-created_at", limit=None, offset=None):
        self._check(table)
        rows = [row for row in self._rows(table) if predicate.matches(row)]
        key = order_by.lstrip("-")
        rows.sort(key=lambda row: lookup(row, key), reverse=order_by.startswith("-"))
        start = offset or 0
        end = None if limit is None else start + limit
        return rows[start:end]

    def count_rows(self, table, predicate):
        self._check(table)
        self.count_calls.append((table, predicate))
        return sum(1 for row in self._rows(table) if predicate.matches(row))

    def insert_row(self, table, values):
        self._check(table)
        row = self.add(table, **values)
        return self.fetch_row(table, row["id"])

    def write_row(self, table, row_id, patch, precondition=None):
        self._check(table)
        self.writes.append((table, row_id, dict(patch), dict(precondition or {})))
        row = self.tables.get(table, {}).get(row_id)
        if row is None:
            return None
        if self.conflict_on_write:
            raise ConflictError(f"{table} {row_id} changed concurrently")
        for column, expected in (precondition or {}).items():
            if row.get(column) != expected:
                raise ConflictError(f"{table} {row_id} changed concurrently")
        row.update(patch)
        row["updated_at"] = self._now()
        return self.fetch_row(table, row_id)


# -----------------------
# World
# -----------------------


def actor_of(profile: dict) -> Actor:
    return Actor.from_profile(profile)


def build_world(store: FakeRecordStore) -> SimpleNamespace:
    w = SimpleNamespace(store=store)
    w.h1 = store.add("hospitals", name="General One", code="H1")
    w.h2 = store.add("hospitals", name="General Two", code="H2")
    w.h3_inactive = store.add("hospitals", name="Closed", code="H3", is_active=False)

    w.d1 = store.add("departments", hospital_id=w.h1["id"], name="Cardiology", type="clinical")
    w.d2 = store.add("departments", hospital_id=w.h2["id"], name="Surgery", type="clinical")

    def profile(role, hospital=None, department=None, **extra):
        return store.add(
            "profiles",
            email=f"{role}-{uuid.uuid4().hex[:6]}@example.org",
            full_name=role.title(),
            role=role,
            hospital_id=hospital["id"] if hospital else None,
            department_id=department["id"] if department else None,
            **extra,
        )

    w.super_admin = profile("super_admin")
    w.admin1 = profile("admin", w.h1)
    w.hod1 = profile("hod", w.h1, w.d1)
    w.doctor1 = profile("doctor", w.h1, w.d1)
    w.nurse1 = profile("nurse", w.h1, w.d1)
    w.nurse1b = profile("nurse", w.h1, w.d1)
    w.admin2 = profile("admin", w.h2)
    w.nurse2 = profile("nurse", w.h2, w.d2)
    w.unbound_doctor = profile("doctor")
    w.inactive_admin = profile("admin", w.h1, is_active=False)

    w.patient1 = store.add("patients", hospital_id=w.h1["id"], department_id=w.d1["id"], full_name="Ann One")
    w.patient2 = store.add("patients", hospital_id=w.h2["id"], department_id=w.d2["id"], full_name="Bob Two")

    start = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)
    w.shift_nurse1 = store.add(
        "shifts",
        hospital_id=w.h1["id"],
        department_id=w.d1["id"],
        assigned_user_id=w.nurse1["id"],
        shift_type="day",
        start_at=start,
        end_at=start + timedelta(hours=8),
    )
    w.shift_doctor1 = store.add(
        "shifts",
        hospital_id=w.h1["id"],
        department_id=w.d1["id"],
        assigned_user_id=w.doctor1["id"],
        shift_type="night",
        start_at=start + timedelta(hours=12),
        end_at=start + timedelta(hours=20),
    )
    w.shift_h2 = store.add(
        "shifts",
        hospital_id=w.h2["id"],
        assigned_user_id=w.nurse2["id"],
        shift_type="day",
        start_at=start,
        end_at=start + timedelta(hours=8),
    )

    def task(hospital, created_by, assigned_to=None, **extra):
        values = dict(
            hospital_id=hospital["id"],
            created_by=created_by["id"],
            assigned_to=assigned_to["id"] if assigned_to else None,
            title="Check vitals",
            status="todo",
            priority="medium",
        )
        values.update(extra)
        return store.add("tasks", **values)

    w.task_by_nurse1 = task(w.h1, w.nurse1)
    w.task_for_nurse1 = task(w.h1, w.doctor1, w.nurse1, status="in_progress", priority="high")
    w.task_for_nurse1b = task(w.h1, w.doctor1, w.nurse1b)
    w.task_h2 = task(w.h2, w.nurse2, w.nurse2, status="done", priority="low")

    def leave(owner, status="pending"):
        return store.add(
            "leave_requests",
            user_id=owner["id"],
            hospital_id=owner["hospital_id"],
            department_id=owner["department_id"],
            start_date=datetime(2026, 3, 1).date(),
            end_date=datetime(2026, 3, 3).date(),
            status=status,
            reviewed_by=None,
            reviewed_at=None,
        )

    w.leave_nurse1 = leave(w.nurse1)
    w.leave_doctor1 = leave(w.doctor1)
    w.leave_nurse2 = leave(w.nurse2)
    w.leave_nurse1_approved = leave(w.nurse1, status="approved")

    w.swap_nurse1 = store.add(
        "swap_requests",
        shift_id=w.shift_nurse1["id"],
        requester_id=w.nurse1["id"],
        requested_with_user_id=w.nurse1b["id"],
        status="pending",
        reviewed_by=None,
        reviewed_at=None,
    )
    w.swap_doctor1 = store.add(
        "swap_requests",
        shift_id=w.shift_doctor1["id"],
        requester_id=w.doctor1["id"],
        requested_with_user_id=None,
        status="pending",
        reviewed_by=None,
        reviewed_at=None,
    )
    w.swap_h2 = store.add(
        "swap_requests",
        shift_id=w.shift_h2["id"],
        requester_id=w.nurse2["id"],
        requested_with_user_id=None,
        status="pending",
        reviewed_by=None,
        reviewed_at=None,
    )

    w.handover_nurse1 = store.add(
        "handovers",
        hospital_id=w.h1["id"],
        from_user_id=w.nurse1["id"],
        to_user_id=w.nurse1b["id"],
        notes="Bed 4 stable",
    )
    w.handover_doctor1 = store.add(
        "handovers",
        hospital_id=w.h1["id"],
        from_user_id=w.doctor1["id"],
        to_user_id=w.hod1["id"],
    )
    w.handover_h2 = store.add(
        "handovers",
        hospital_id=w.h2["id"],
        from_user_id=w.nurse2["id"],
    )
    return w


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def world(store):
    return build_world(store)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_record_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Bearer headers for a profile row."""

    def _headers(profile: dict) -> dict:
        return {"Authorization": f"Bearer {create_access_token(str(profile['id']))}"}

    return _headers
