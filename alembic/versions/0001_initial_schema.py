"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-02-01 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)

USER_ROLE = postgresql.ENUM("super_admin", "admin", "hod", "doctor", "nurse", name="user_role_enum", create_type=False)
TASK_STATUS = postgresql.ENUM("todo", "in_progress", "done", "cancelled", name="task_status_enum", create_type=False)
TASK_PRIORITY = postgresql.ENUM("low", "medium", "high", "critical", name="task_priority_enum", create_type=False)
REQUEST_STATUS = postgresql.ENUM(
    "pending", "approved", "rejected", "cancelled", name="request_status_enum", create_type=False
)

ENUMS = (USER_ROLE, TASK_STATUS, TASK_PRIORITY, REQUEST_STATUS)


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "hospitals",
        sa.Column("id", UUID, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    # departments.hod_user_id -> profiles is added after profiles exists
    op.create_table(
        "departments",
        sa.Column("id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("hod_user_id", UUID, nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_departments_hospital_id"), "departments", ["hospital_id"])

    op.create_table(
        "profiles",
        sa.Column("id", UUID, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("hospital_id", UUID, nullable=True),
        sa.Column("department_id", UUID, nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profiles_hospital_id"), "profiles", ["hospital_id"])
    op.create_foreign_key(
        "departments_hod_user_id_fkey",
        "departments",
        "profiles",
        ["hod_user_id"],
        ["id"],
        ondelete="SET NULL",
    )

    op.create_table(
        "patients",
        sa.Column("id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("department_id", UUID, nullable=True),
        sa.Column("mrn", sa.String(length=100), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("notes", sa.String(length=2000), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_patients_hospital_id"), "patients", ["hospital_id"])

    op.create_table(
        "tasks",
        sa.Column("id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("department_id", UUID, nullable=True),
        sa.Column("patient_id", UUID, nullable=True),
        sa.Column("created_by", UUID, nullable=False),
        sa.Column("assigned_to", UUID, nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", TASK_STATUS, server_default=sa.text("'todo'"), nullable=False),
        sa.Column("priority", TASK_PRIORITY, server_default=sa.text("'medium'"), nullable=False),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["assigned_to"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("hospital_id", "patient_id", "created_by", "assigned_to"):
        op.create_index(op.f(f"ix_tasks_{column}"), "tasks", [column])

    op.create_table(
        "task_comments",
        sa.Column("id", UUID, nullable=False),
        sa.Column("task_id", UUID, nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_task_comments_task_id"), "task_comments", ["task_id"])

    op.create_table(
        "shifts",
        sa.Column("id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("department_id", UUID, nullable=True),
        sa.Column("assigned_user_id", UUID, nullable=True),
        sa.Column("shift_type", sa.String(length=50), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("end_at > start_at", name="ck_shifts_end_after_start"),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_user_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("hospital_id", "assigned_user_id", "start_at"):
        op.create_index(op.f(f"ix_shifts_{column}"), "shifts", [column])

    op.create_table(
        "leave_requests",
        sa.Column("id", UUID, nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("department_id", UUID, nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(length=1000), nullable=True),
        sa.Column("status", REQUEST_STATUS, server_default=sa.text("'pending'"), nullable=False),
        sa.Column("reviewed_by", UUID, nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("end_date >= start_date", name="ck_leave_requests_dates"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("user_id", "hospital_id"):
        op.create_index(op.f(f"ix_leave_requests_{column}"), "leave_requests", [column])

    op.create_table(
        "swap_requests",
        sa.Column("id", UUID, nullable=False),
        sa.Column("shift_id", UUID, nullable=False),
        sa.Column("requester_id", UUID, nullable=False),
        sa.Column("requested_with_user_id", UUID, nullable=True),
        sa.Column("status", REQUEST_STATUS, server_default=sa.text("'pending'"), nullable=False),
        sa.Column("reason", sa.String(length=1000), nullable=True),
        sa.Column("reviewed_by", UUID, nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["shift_id"], ["shifts.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["requester_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["requested_with_user_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("shift_id", "requester_id", "requested_with_user_id"):
        op.create_index(op.f(f"ix_swap_requests_{column}"), "swap_requests", [column])

    op.create_table(
        "handovers",
        sa.Column("id", UUID, nullable=False),
        sa.Column("hospital_id", UUID, nullable=False),
        sa.Column("department_id", UUID, nullable=True),
        sa.Column("patient_id", UUID, nullable=True),
        sa.Column("shift_id", UUID, nullable=True),
        sa.Column("from_user_id", UUID, nullable=False),
        sa.Column("to_user_id", UUID, nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["hospital_id"], ["hospitals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["shift_id"], ["shifts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["from_user_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["to_user_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("hospital_id", "from_user_id", "to_user_id"):
        op.create_index(op.f(f"ix_handovers_{column}"), "handovers", [column])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "handovers",
        "swap_requests",
        "leave_requests",
        "shifts",
        "task_comments",
        "tasks",
        "patients",
    ):
        op.drop_table(table)
    op.drop_constraint("departments_hod_user_id_fkey", "departments", type_="foreignkey")
    op.drop_table("profiles")
    op.drop_table("departments")
    op.drop_table("hospitals")

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
