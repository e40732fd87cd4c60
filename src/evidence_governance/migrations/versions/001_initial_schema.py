"""Initial schema: cases, evidence, permissions, access grants, routing log, security events, violations.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_APPEND_ONLY_TABLES = ("jurisdiction_routing_log", "security_events")


def upgrade() -> None:
    # Cases and evidence
    op.create_table(
        "cases",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("case_number", sa.String(100), unique=True),
        sa.Column("title", sa.String(500), server_default=""),
        sa.Column("jurisdiction", sa.String(20), nullable=False),
        sa.Column("type", sa.String(50)),
        sa.Column("priority", sa.String(20)),
        sa.Column("classification", sa.String(30)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_cases_jurisdiction", "cases", ["jurisdiction"])

    op.create_table(
        "evidence",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("case_id", sa.String(100), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("classification", sa.String(30)),
        sa.Column("file_name", sa.String(500), server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_evidence_case_id", "evidence", ["case_id"])

    # Standing cross-jurisdiction permissions
    op.create_table(
        "user_jurisdiction_permissions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.String(200), nullable=False),
        sa.Column("jurisdiction", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("granted_by", sa.String(200)),
        sa.Column("granted_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_permissions_user_jurisdiction",
        "user_jurisdiction_permissions",
        ["user_id", "jurisdiction"],
    )

    # Time-bounded access grants (revoked, never deleted)
    op.create_table(
        "cross_jurisdiction_access_grants",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("case_id", sa.String(100), nullable=False),
        sa.Column("target_jurisdiction", sa.String(20), nullable=False),
        sa.Column("granted_by", sa.String(200), nullable=False),
        sa.Column("granted_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("conditions", JSONB, server_default="{}"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("revoked_by", sa.String(200)),
        sa.Column("revoked_at", sa.DateTime(timezone=True)),
        sa.Column("revocation_reason", sa.Text),
    )
    op.create_index("ix_cross_jurisdiction_access_grants_case_id", "cross_jurisdiction_access_grants", ["case_id"])
    op.create_index(
        "ix_cross_jurisdiction_access_grants_target_jurisdiction",
        "cross_jurisdiction_access_grants",
        ["target_jurisdiction"],
    )

    # Routing log (append-only)
    op.create_table(
        "jurisdiction_routing_log",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("case_id", sa.String(100), nullable=False),
        sa.Column("requesting_user", sa.String(200), nullable=False),
        sa.Column("source_jurisdiction", sa.String(20)),
        sa.Column("target_jurisdiction", sa.String(20), nullable=False),
        sa.Column("routing_decision", sa.String(20), nullable=False),
        sa.Column("compliance_status", sa.String(20), nullable=False),
        sa.Column("required_approvals", JSONB, server_default="[]"),
        sa.Column("restrictions", JSONB, server_default="[]"),
        sa.Column("reason", sa.Text, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_jurisdiction_routing_log_case_id", "jurisdiction_routing_log", ["case_id"])
    op.create_index("ix_routing_log_source", "jurisdiction_routing_log", ["source_jurisdiction", "created_at"])
    op.create_index("ix_routing_log_target", "jurisdiction_routing_log", ["target_jurisdiction", "created_at"])

    # Security events (append-only)
    op.create_table(
        "security_events",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_type", sa.String(60), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(200), nullable=False),
        sa.Column("user_id", sa.String(200), nullable=False),
        sa.Column("metadata", JSONB, server_default="{}"),
        sa.Column("occurred_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_security_events_event_type", "security_events", ["event_type"])
    op.create_index("ix_security_events_resource_id", "security_events", ["resource_id"])
    op.create_index("ix_security_events_user_id", "security_events", ["user_id"])

    # Compliance violations
    op.create_table(
        "compliance_violations",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("jurisdiction", sa.String(20), nullable=False),
        sa.Column("case_id", sa.String(100)),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("severity", sa.String(20), nullable=False, server_default="high"),
        sa.Column("detected_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_violations_jurisdiction_detected",
        "compliance_violations",
        ["jurisdiction", "detected_at"],
    )

    # Immutability trigger: reject UPDATE and DELETE on the audit tables
    op.execute("""
        CREATE OR REPLACE FUNCTION prevent_evidence_audit_mutation()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION '% is append-only: % operations are not allowed', TG_TABLE_NAME, TG_OP;
            RETURN NULL;
        END;
        $$ LANGUAGE plpgsql;
    """)
    for table in _APPEND_ONLY_TABLES:
        op.execute(f"""
            CREATE TRIGGER trg_{table}_immutable
            BEFORE UPDATE OR DELETE ON {table}
            FOR EACH ROW
            EXECUTE FUNCTION prevent_evidence_audit_mutation();
        """)


def downgrade() -> None:
    for table in _APPEND_ONLY_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_immutable ON {table}")
    op.execute("DROP FUNCTION IF EXISTS prevent_evidence_audit_mutation()")
    op.drop_table("compliance_violations")
    op.drop_table("security_events")
    op.drop_table("jurisdiction_routing_log")
    op.drop_table("cross_jurisdiction_access_grants")
    op.drop_table("user_jurisdiction_permissions")
    op.drop_table("evidence")
    op.drop_table("cases")
