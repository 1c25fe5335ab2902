"""Create error notes, analytics, app log and fix step tables.

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    analyticseventtype = sa.Enum(
        "page_view",
        "error_code_search",
        "button_click",
        "form_submit",
        "device_view",
        "photo_upload",
        "custom",
        name="analyticseventtype",
    )
    apploglevel = sa.Enum(
        "Critical",
        "Urgent",
        "Shutdown",
        "Error",
        "Warning",
        "Info",
        "Debug",
        name="apploglevel",
    )

    op.create_table(
        "error_notes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("system_name", sa.String(length=160), nullable=False),
        sa.Column("error_code", sa.String(length=80), nullable=False),
        sa.Column("user_id", sa.String(length=200), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_error_notes_system_code_user",
        "error_notes",
        ["system_name", "error_code", "user_id"],
    )

    op.create_table(
        "app_analytics",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("event_type", analyticseventtype, nullable=False),
        sa.Column("user_id", sa.String(length=200), nullable=True),
        sa.Column("device_id", sa.String(length=64), nullable=True),
        sa.Column("path", sa.String(length=500), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_app_analytics_timestamp", "app_analytics", ["timestamp"])
    op.create_index("ix_app_analytics_type_timestamp", "app_analytics", ["event_type", "timestamp"])

    op.create_table(
        "app_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("level", apploglevel, nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("stack_trace", sa.JSON(), nullable=True),
        sa.Column("user_id", sa.String(length=200), nullable=True),
        sa.Column("page_path", sa.String(length=500), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_app_logs_timestamp", "app_logs", ["timestamp"])
    op.create_index("ix_app_logs_level_timestamp", "app_logs", ["level", "timestamp"])

    op.create_table(
        "fix_steps",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("brand", sa.String(length=120), nullable=True),
        sa.Column("model", sa.String(length=120), nullable=True),
        sa.Column("error_code", sa.String(length=80), nullable=True),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("media_urls", sa.JSON(), nullable=True),
        sa.Column("created_by", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_fix_steps_brand", "fix_steps", ["brand"])
    op.create_index("ix_fix_steps_error_code", "fix_steps", ["error_code"])


def downgrade() -> None:
    op.drop_index("ix_fix_steps_error_code", table_name="fix_steps")
    op.drop_index("ix_fix_steps_brand", table_name="fix_steps")
    op.drop_table("fix_steps")
    op.drop_index("ix_app_logs_level_timestamp", table_name="app_logs")
    op.drop_index("ix_app_logs_timestamp", table_name="app_logs")
    op.drop_table("app_logs")
    op.drop_index("ix_app_analytics_type_timestamp", table_name="app_analytics")
    op.drop_index("ix_app_analytics_timestamp", table_name="app_analytics")
    op.drop_table("app_analytics")
    op.drop_index("ix_error_notes_system_code_user", table_name="error_notes")
    op.drop_table("error_notes")
    sa.Enum(name="apploglevel").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="analyticseventtype").drop(op.get_bind(), checkfirst=True)
