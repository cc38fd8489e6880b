"""Initial schema - permission catalog, roles, resources, grants, audit.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    # Type-scoped names carry their type prefix ("document:read"), so name alone is unique.
    op.create_index("ix_permission_name", "permission", ["name"], unique=True)

    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("scope", sa.String(20), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("tenant_id", sa.String(255), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_role_name_system",
        "role",
        ["name"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )
    op.create_index("ix_role_name_tenant", "role", ["tenant_id", "name"], unique=True)

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "permission_id",
            sa.UUID(),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "role_assignment",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tenant_id", sa.String(255), nullable=False),
        sa.Column("assigned_by", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_role_assignment_user_tenant", "role_assignment", ["user_id", "tenant_id"])

    op.create_table(
        "membership",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("organization_id", sa.String(255), nullable=False),
        sa.Column("tenant_id", sa.String(255), nullable=False),
        sa.Column("membership_type", sa.String(20), nullable=False, server_default="MEMBER"),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_membership_user_tenant", "membership", ["user_id", "tenant_id"])

    op.create_table(
        "resource",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("tenant_id", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("organization_id", sa.String(255), nullable=True),
        sa.Column(
            "parent_resource_id",
            sa.String(255),
            sa.ForeignKey("resource.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "public_permissions",
            postgresql.ARRAY(sa.String(100)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("public_link_token", sa.String(128), nullable=True),
        sa.Column("public_link_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_resource_tenant", "resource", ["tenant_id"])
    op.create_index("ix_resource_owner_tenant", "resource", ["owner_id", "tenant_id"])
    op.create_index("ix_resource_parent", "resource", ["parent_resource_id"])
    op.create_index("ix_resource_organization", "resource", ["organization_id", "tenant_id"])
    op.create_index("ix_resource_public_link_token", "resource", ["public_link_token"], unique=True)

    op.create_table(
        "resource_grant",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "resource_id",
            sa.String(255),
            sa.ForeignKey("resource.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "permission_id",
            sa.UUID(),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), nullable=True),
        sa.Column("tenant_id", sa.String(255), nullable=False),
        sa.Column("grant_type", sa.String(20), nullable=False, server_default="DIRECT"),
        sa.Column("granted_by", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(255), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(user_id IS NULL) <> (role_id IS NULL)",
            name="ck_resource_grant_one_subject",
        ),
    )
    # One active grant per (subject, resource, permission); INSERT ... ON CONFLICT relies on these.
    op.create_index(
        "ux_resource_grant_user_active",
        "resource_grant",
        ["user_id", "resource_id", "permission_id"],
        unique=True,
        postgresql_where=sa.text("is_active AND user_id IS NOT NULL"),
    )
    op.create_index(
        "ux_resource_grant_role_active",
        "resource_grant",
        ["role_id", "resource_id", "permission_id"],
        unique=True,
        postgresql_where=sa.text("is_active AND role_id IS NOT NULL"),
    )
    op.create_index("ix_resource_grant_resource", "resource_grant", ["resource_id"])
    op.create_index("ix_resource_grant_user_tenant", "resource_grant", ["user_id", "tenant_id"])

    op.create_table(
        "audit_event",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("tenant_id", sa.String(255), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("actor_id", sa.String(255), nullable=True),
        sa.Column("target_user_id", sa.String(255), nullable=True),
        sa.Column("resource_id", sa.String(255), nullable=True),
        sa.Column("permission", sa.String(100), nullable=True),
        sa.Column("role_id", sa.UUID(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("details", postgresql.JSONB(), nullable=False, server_default="{}"),
    )
    op.create_index("ix_audit_event_tenant_time", "audit_event", ["tenant_id", "occurred_at"])
    op.create_index("ix_audit_event_resource", "audit_event", ["resource_id"])


def downgrade() -> None:
    op.drop_table("audit_event")
    op.drop_table("resource_grant")
    op.drop_table("resource")
    op.drop_table("membership")
    op.drop_table("role_assignment")
    op.drop_table("role_permission")
    op.drop_table("role")
    op.drop_table("permission")
