"""Initial schema and built-in roles for ExpertPress

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

This is the initial migration that creates the authoring tables and seeds
the built-in staff roles:
- users, roles and the roles_users join table
- posts and the ordered posts_experts join table
- Owner, Administrator, Editor, Expert and Contributor roles

Revision format: YYYYMMDD_HHMMSS_description

"""

import uuid
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_ROLES = [
    ("Owner", "Site owner"),
    ("Administrator", "Full access to the site and its staff"),
    ("Editor", "Can publish and manage every post"),
    ("Expert", "Can write and publish their own posts"),
    ("Contributor", "Can write their own drafts"),
]


def upgrade() -> None:
    """Create all tables and seed the built-in roles."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False),
        sa.Column("email", sa.String(191), nullable=False),
        sa.Column("profile_image", sa.String(2000), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("website", sa.String(2000), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="active"),
        sa.Column("visibility", sa.String(50), nullable=False, server_default="public"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_slug", "slug", unique=True),
        sa.Index("ix_users_email", "email", unique=True),
    )

    # Create roles table
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_roles_name", "name", unique=True),
    )

    # Create roles_users table
    op.create_table(
        "roles_users",
        sa.Column("user_id", sa.String(24), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role_id", sa.String(24), sa.ForeignKey("roles.id"), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "role_id"),
    )

    # Create posts table
    op.create_table(
        "posts",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("title", sa.String(2000), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False),
        sa.Column("html", sa.Text(), nullable=True),
        sa.Column("plaintext", sa.Text(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="draft"),
        sa.Column("visibility", sa.String(50), nullable=False, server_default="public"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("expert_id", sa.String(24), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_posts_slug", "slug", unique=True),
        sa.Index("ix_posts_status", "status"),
        sa.Index("ix_posts_expert_id", "expert_id"),
        sa.Index("ix_posts_created_at", "created_at"),
    )

    # Create posts_experts table
    op.create_table(
        "posts_experts",
        sa.Column("id", sa.String(24), nullable=False),
        sa.Column("post_id", sa.String(24), sa.ForeignKey("posts.id"), nullable=False),
        sa.Column("expert_id", sa.String(24), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_posts_experts_post_id", "post_id"),
        sa.Index("ix_posts_experts_expert_id", "expert_id"),
    )

    # Seed built-in roles
    op.bulk_insert(
        roles,
        [{"id": uuid.uuid4().hex[:24], "name": name, "description": description} for name, description in DEFAULT_ROLES],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("posts_experts")
    op.drop_table("posts")
    op.drop_table("roles_users")
    op.drop_table("roles")
    op.drop_table("users")
