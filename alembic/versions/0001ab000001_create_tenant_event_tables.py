"""create tenant, event, audit_log and setting tables

Revision ID: 0001ab000001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001ab000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "tenant",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("locale", sa.String(), nullable=False, server_default="en-US"),
        sa.Column("primary_color", sa.String(), nullable=False, server_default="#4F46E5"),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("font_family", sa.String(), nullable=True),
    )
    op.create_index("ix_tenant_name", "tenant", ["name"])
    op.create_index("ix_tenant_slug", "tenant", ["slug"], unique=True)

    op.create_table(
        "event",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenant.id"), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "status",
            sa.Enum("draft", "published", "archived", name="event_status", native_enum=False),
            nullable=False,
            server_default="draft",
        ),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("timezone", sa.String(), nullable=False, server_default="UTC"),
        sa.Column("venue", sa.String(), nullable=True),
        sa.Column("banner_url", sa.Text(), nullable=True),
        sa.Column("stream", sa.JSON(), nullable=True),
        sa.Column("sessions", sa.JSON(), nullable=False),
        sa.Column("speakers", sa.JSON(), nullable=False),
        sa.Column("resources", sa.JSON(), nullable=False),
        sa.UniqueConstraint("tenant_id", "slug", name="uq_event_tenant_slug"),
    )
    op.create_index("ix_event_tenant_id", "event", ["tenant_id"])
    op.create_index("ix_event_slug", "event", ["slug"])
    op.create_index("ix_event_status", "event", ["status"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenant.id"), nullable=False),
        sa.Column("actor", sa.String(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=True),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
    )
    op.create_index("ix_audit_log_tenant_id", "audit_log", ["tenant_id"])
    op.create_index("ix_audit_log_actor", "audit_log", ["actor"])
    op.create_index("ix_audit_log_event_id", "audit_log", ["event_id"])
    op.create_index("ix_audit_log_event_type", "audit_log", ["event_type"])

    op.create_table(
        "setting",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.JSON(), nullable=True),
    )
    op.create_index("ix_setting_key", "setting", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_setting_key", table_name="setting")
    op.drop_table("setting")

    op.drop_index("ix_audit_log_event_type", table_name="audit_log")
    op.drop_index("ix_audit_log_event_id", table_name="audit_log")
    op.drop_index("ix_audit_log_actor", table_name="audit_log")
    op.drop_index("ix_audit_log_tenant_id", table_name="audit_log")
    op.drop_table("audit_log")

    op.drop_index("ix_event_status", table_name="event")
    op.drop_index("ix_event_slug", table_name="event")
    op.drop_index("ix_event_tenant_id", table_name="event")
    op.drop_table("event")

    op.drop_index("ix_tenant_slug", table_name="tenant")
    op.drop_index("ix_tenant_name", table_name="tenant")
    op.drop_table("tenant")
