"""station governance schema

Revision ID: 5c1e2a9d4b7f
Revises:
Create Date: 2026-10-16 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a9d4b7f"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create stations, roles, memberships, moderation, invites, content and karma."""
    op.create_table(
        "station",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("owner_principal", sa.Text(), nullable=False),
        sa.Column("member_count", sa.Integer(), nullable=False),
        sa.Column("post_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_station_owner_principal", "station", ["owner_principal"])

    op.create_table(
        "station_role",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("color_hint", sa.Text(), nullable=True),
        sa.Column("capabilities", sa.JSON(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("is_system", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("station_id", "slug", name="uq_station_role_slug"),
    )
    op.create_index("ix_station_role_station_id", "station_role", ["station_id"])

    op.create_table(
        "station_membership",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("principal", sa.Text(), nullable=False),
        sa.Column("system_role", sa.Text(), nullable=False),
        sa.Column("custom_role_id", sa.Integer(), nullable=True),
        sa.Column("karma_earned_here", sa.Integer(), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["custom_role_id"], ["station_role.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "station_id", "principal", name="uq_station_membership_principal"
        ),
    )
    op.create_index("ix_station_membership_station_id", "station_membership", ["station_id"])
    op.create_index("ix_station_membership_principal", "station_membership", ["principal"])
    op.create_index(
        "ix_station_membership_custom_role_id", "station_membership", ["custom_role_id"]
    )

    op.create_table(
        "moderation_action",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("target_principal", sa.Text(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("issued_by", sa.Text(), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("lifted_by", sa.Text(), nullable=True),
        sa.Column("lifted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("kind IN ('ban', 'mute')", name="ck_moderation_action_kind"),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_moderation_action_station_target",
        "moderation_action",
        ["station_id", "target_principal"],
    )

    op.create_table(
        "station_invite",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=8), nullable=False),
        sa.Column("invited_by", sa.Text(), nullable=False),
        sa.Column("invited_principal", sa.Text(), nullable=True),
        sa.Column("role_on_join", sa.Text(), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("used_count", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(
        "ix_station_invite_station_active", "station_invite", ["station_id", "is_active"]
    )

    op.create_table(
        "station_audit_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.Text(), nullable=False),
        sa.Column("actor_principal", sa.Text(), nullable=False),
        sa.Column("target_principal", sa.Text(), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_station_audit_log_station_time", "station_audit_log", ["station_id", "timestamp"]
    )

    op.create_table(
        "station_post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("author_principal", sa.Text(), nullable=False),
        sa.Column("post_type", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_owner_post", sa.Boolean(), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False),
        sa.Column("is_edited", sa.Boolean(), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("comment_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_station_post_station_id", "station_post", ["station_id"])
    op.create_index("ix_station_post_author_principal", "station_post", ["author_principal"])
    op.create_index("ix_station_post_station_type", "station_post", ["station_id", "post_type"])

    op.create_table(
        "station_comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("author_principal", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("depth", sa.Integer(), nullable=False),
        sa.Column("is_edited", sa.Boolean(), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["station_post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["station_id"], ["station.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["station_comment.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_station_comment_post_id", "station_comment", ["post_id"])
    op.create_index("ix_station_comment_parent_id", "station_comment", ["parent_id"])

    op.create_table(
        "station_post_vote",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("voter_principal", sa.Text(), nullable=False),
        sa.Column("direction", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "direction IN ('up', 'down')", name="ck_station_post_vote_direction"
        ),
        sa.ForeignKeyConstraint(["post_id"], ["station_post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "voter_principal"),
    )

    op.create_table(
        "station_comment_vote",
        sa.Column("comment_id", sa.Integer(), nullable=False),
        sa.Column("voter_principal", sa.Text(), nullable=False),
        sa.Column("direction", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "direction IN ('up', 'down')", name="ck_station_comment_vote_direction"
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["station_comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("comment_id", "voter_principal"),
    )

    op.create_table(
        "karma_ledger",
        sa.Column("principal", sa.Text(), nullable=False),
        sa.Column("external_karma", sa.Integer(), nullable=False),
        sa.Column("unique_stations_helped", sa.Integer(), nullable=False),
        sa.Column("promotion_boost", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("principal"),
    )


def downgrade() -> None:
    """Drop every station governance table."""
    op.drop_table("karma_ledger")
    op.drop_table("station_comment_vote")
    op.drop_table("station_post_vote")
    op.drop_index("ix_station_comment_parent_id", table_name="station_comment")
    op.drop_index("ix_station_comment_post_id", table_name="station_comment")
    op.drop_table("station_comment")
    op.drop_index("ix_station_post_station_type", table_name="station_post")
    op.drop_index("ix_station_post_author_principal", table_name="station_post")
    op.drop_index("ix_station_post_station_id", table_name="station_post")
    op.drop_table("station_post")
    op.drop_index("ix_station_audit_log_station_time", table_name="station_audit_log")
    op.drop_table("station_audit_log")
    op.drop_index("ix_station_invite_station_active", table_name="station_invite")
    op.drop_table("station_invite")
    op.drop_index("ix_moderation_action_station_target", table_name="moderation_action")
    op.drop_table("moderation_action")
    op.drop_index("ix_station_membership_custom_role_id", table_name="station_membership")
    op.drop_index("ix_station_membership_principal", table_name="station_membership")
    op.drop_index("ix_station_membership_station_id", table_name="station_membership")
    op.drop_table("station_membership")
    op.drop_index("ix_station_role_station_id", table_name="station_role")
    op.drop_table("station_role")
    op.drop_index("ix_station_owner_principal", table_name="station")
    op.drop_table("station")
