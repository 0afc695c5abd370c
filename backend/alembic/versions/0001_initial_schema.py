"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the civic events service:
active_areas, active_area_tags, users, sdgs, events and every table an
event owns (images, check-ins, SDG links, point exchanges, activity logs,
QR codes, dashboard rollups, transactions).
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_status = sa.Enum("inactive", "active", name="eventstatus")
event_progress = sa.Enum("draft", "published", "closed", name="eventprogress")
event_category = sa.Enum(
    "education", "festival", "sport", "culture", "health", "consultation", "other",
    name="eventcategory",
)
user_role = sa.Enum("admin", "general", name="userrole")


def upgrade() -> None:
    # --- active_areas ---
    op.create_table(
        "active_areas",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "active_area_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("active_area_id", sa.Integer, sa.ForeignKey("active_areas.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    )

    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="general"),
        sa.Column("permission_code", sa.String(50), nullable=True),
        sa.Column("active_area_id", sa.Integer, sa.ForeignKey("active_areas.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "sdgs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("status", event_status, nullable=False, server_default="active"),
        sa.Column("progress", event_progress, nullable=False, server_default="published"),
        sa.Column("category", event_category, nullable=False, server_default="education"),
        sa.Column("calendar_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("map_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("display_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("qr_start_datetime", sa.DateTime(timezone=True), nullable=True),
        sa.Column("lat", sa.Numeric(10, 7), nullable=True),
        sa.Column("lng", sa.Numeric(10, 7), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("town", sa.Text, nullable=True),
        sa.Column("post_code", sa.String(255), nullable=True),
        sa.Column("access", sa.Text, nullable=True),
        sa.Column("active_area_id", sa.Integer, sa.ForeignKey("active_areas.id"), nullable=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("prefecture_id", sa.Integer, nullable=True),
        sa.Column("city_id", sa.Integer, nullable=True),
        sa.Column("point", sa.Integer, nullable=False, server_default="0"),
        sa.Column("event_tag", sa.Integer, nullable=True),
        sa.Column("pdf_info", sa.String(500), nullable=True),
        sa.Column("manager", sa.String(255), nullable=True),
        sa.Column("sponsor", sa.Text, nullable=True),
        sa.Column("application", sa.String(255), nullable=True),
        sa.Column("url", sa.String(255), nullable=True),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("period", sa.String(255), nullable=True),
        sa.Column("period_note", sa.String(255), nullable=True),
        sa.Column("inquiry_email", sa.String(255), nullable=True),
        sa.Column("inquiry_phone_number", sa.String(255), nullable=True),
        sa.Column("facebook", sa.String(255), nullable=True),
        sa.Column("instagram", sa.String(255), nullable=True),
        sa.Column("twitter", sa.String(255), nullable=True),
        sa.Column("line", sa.String(255), nullable=True),
        sa.Column("sdgs_content", sa.String(400), nullable=True),
        sa.Column("water_station", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_active_area_id", "events", ["active_area_id"])
    op.create_index("ix_events_user_id", "events", ["user_id"])

    # --- owned by events ---
    op.create_table(
        "event_images",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("image", sa.String(500), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "event_checkins",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("point", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "event_sdgs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("sdg_id", sa.Integer, sa.ForeignKey("sdgs.id"), nullable=False),
    )

    op.create_table(
        "event_point_exchanges",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("point", sa.Integer, nullable=False, server_default="0"),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("detail", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "qr_codes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("code", sa.String(255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "dashboard_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False),
        sa.Column("active_area_id", sa.Integer, sa.ForeignKey("active_areas.id"), nullable=False),
        sa.Column("total_point", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "active_area_id"),
    )

    op.create_table(
        "transactions",
        sa.Column("transaction_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False, index=True),
        sa.Column("actor_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("snapshot", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    for table in (
        "transactions", "dashboard_events", "qr_codes", "activity_logs", "event_point_exchanges",
        "event_sdgs", "event_checkins", "event_images", "events", "sdgs", "users",
        "active_area_tags", "active_areas",
    ):
        op.drop_table(table)
    for enum_type in (user_role, event_category, event_progress, event_status):
        enum_type.drop(op.get_bind(), checkfirst=True)
