"""initial_event_ops_schema

Revision ID: a0e1v2o3p4s5
Revises:
Create Date: 2026-10-19 09:00:00.000000

행사 운영 대시보드 스키마 생성.
zones, shift_assignments, staff, teams, facilities, tasks,
issues, emergency_reports, notifications, ads.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "a0e1v2o3p4s5"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()"))


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "zones",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("headcount", sa.Integer(), server_default="0", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "shift_assignments",
        _id(),
        sa.Column("zone_id", UUID(as_uuid=True), sa.ForeignKey("zones.id"), nullable=False),
        sa.Column("shift_type", sa.String(20), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("assigned_staff_ids", sa.JSON(), server_default="[]", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("zone_id", "shift_type", name="uq_shift_zone_type"),
    )

    op.create_table(
        "staff",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), server_default="staff", nullable=False),
        sa.Column("zone", sa.String(255), server_default="General", nullable=False),
        sa.Column("department", sa.String(255), server_default="General", nullable=False),
        sa.Column("status", sa.String(20), server_default="active", nullable=False),
        sa.Column("teams", sa.JSON(), server_default="[]", nullable=False),
        _timestamp("join_date"),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_staff_status", "staff", ["status"])

    op.create_table(
        "teams",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("leader_id", UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("member_ids", sa.JSON(), server_default="[]", nullable=False),
        sa.Column("zone_ids", sa.JSON(), server_default="[]", nullable=False),
        sa.Column("default_shift", sa.String(20), server_default="morning", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "facilities",
        _id(),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("zone_id", UUID(as_uuid=True), sa.ForeignKey("zones.id"), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("status", sa.String(30), nullable=False),
        _timestamp("last_updated"),
        sa.Column("assigned_task", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_facilities_zone_id", "facilities", ["zone_id"])

    op.create_table(
        "tasks",
        _id(),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("facility_id", UUID(as_uuid=True), sa.ForeignKey("facilities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("zone_id", UUID(as_uuid=True), sa.ForeignKey("zones.id"), nullable=True),
        sa.Column("assignee_kind", sa.String(10), nullable=False),
        sa.Column("assignee_id", UUID(as_uuid=True), nullable=False),
        sa.Column("priority", sa.String(10), server_default="Medium", nullable=False),
        sa.Column("sla_minutes", sa.Integer(), server_default="60", nullable=False),
        sa.Column("status", sa.String(20), server_default="Pending", nullable=False),
        _timestamp("created_at"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("photos_before", sa.JSON(), server_default="[]", nullable=False),
        sa.Column("photos_after", sa.JSON(), server_default="[]", nullable=False),
        _timestamp("updated_at"),
    )
    op.create_index("ix_tasks_status", "tasks", ["status"])

    op.create_table(
        "issues",
        _id(),
        sa.Column("facility_ref", sa.String(255), nullable=True),
        sa.Column("zone_ref", sa.String(255), nullable=True),
        sa.Column("category", sa.String(100), server_default="general", nullable=False),
        sa.Column("severity", sa.String(20), server_default="medium", nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("reported_by", sa.String(255), server_default="anonymous", nullable=False),
        sa.Column("status", sa.String(20), server_default="open", nullable=False),
        sa.Column("assigned_to", sa.String(255), nullable=True),
        _timestamp("reported_at"),
    )
    op.create_index("ix_issues_status", "issues", ["status"])

    op.create_table(
        "emergency_reports",
        _id(),
        sa.Column("contact", sa.String(255), server_default="", nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("location_text", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("source", sa.String(50), server_default="app", nullable=False),
        sa.Column("type", sa.String(50), server_default="general", nullable=False),
        _timestamp("reported_at"),
    )

    op.create_table(
        "notifications",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("number", sa.String(50), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _timestamp("sent_at"),
    )

    op.create_table(
        "ads",
        _id(),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(20), server_default="ad", nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("valid_to", sa.DateTime(timezone=True), nullable=False),
        sa.Column("contact", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), server_default="unpublished", nullable=False),
        _timestamp("created_at"),
    )


def downgrade() -> None:
    op.drop_table("ads")
    op.drop_table("notifications")
    op.drop_table("emergency_reports")
    op.drop_index("ix_issues_status")
    op.drop_table("issues")
    op.drop_index("ix_tasks_status")
    op.drop_table("tasks")
    op.drop_index("ix_facilities_zone_id")
    op.drop_table("facilities")
    op.drop_table("teams")
    op.drop_index("ix_staff_status")
    op.drop_table("staff")
    op.drop_table("shift_assignments")
    op.drop_table("zones")
