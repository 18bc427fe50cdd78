"""Baseline schema: challenges, participation, progress, invites, badges, friends.

Types are portable so the same migration runs on PostgreSQL (JSONB)
and on SQLite for local development.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSONDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True), nullable=True)
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    """Create all tables."""
    # --- challenges ---
    op.create_table(
        "challenges",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("author", sa.String(100), nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("challenge_type", sa.String(50), nullable=False),
        sa.Column("configuration", JSONDocument, nullable=False),
        sa.Column("invite_config", JSONDocument, nullable=True),
        sa.Column("hamalert_config", JSONDocument, nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_challenges_category", "challenges", ["category"])
    op.create_index("idx_challenges_active", "challenges", ["is_active"])

    # --- participants (device tokens) ---
    op.create_table(
        "participants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("callsign", sa.String(20), nullable=False, unique=True),
        sa.Column("device_token", sa.String(64), nullable=False, unique=True),
        sa.Column("device_name", sa.String(100), nullable=True),
        _timestamp("created_at"),
        _timestamp("last_seen_at"),
    )

    # --- challenge_participants ---
    op.create_table(
        "challenge_participants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("challenge_id", sa.Uuid(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("callsign", sa.String(20), nullable=False),
        sa.Column("invite_token", sa.String(64), nullable=True),
        _timestamp("joined_at"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.UniqueConstraint("challenge_id", "callsign", name="challenge_participants_challenge_id_callsign_key"),
    )
    op.create_index("idx_challenge_participants_callsign", "challenge_participants", ["callsign"])

    # --- progress ---
    op.create_table(
        "progress",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("challenge_id", sa.Uuid(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("callsign", sa.String(20), nullable=False),
        sa.Column("completed_goals", JSONDocument, nullable=False),
        sa.Column("current_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_tier", sa.String(50), nullable=True),
        _timestamp("last_qso_date", nullable=True),
        _timestamp("updated_at"),
        sa.UniqueConstraint("challenge_id", "callsign", name="progress_challenge_id_callsign_key"),
    )
    op.create_index("idx_progress_leaderboard", "progress", ["challenge_id", "score", "updated_at"])

    # --- invite_tokens ---
    op.create_table(
        "invite_tokens",
        sa.Column("token", sa.String(64), primary_key=True),
        sa.Column("challenge_id", sa.Uuid(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("use_count", sa.Integer(), nullable=False, server_default="0"),
        _timestamp("expires_at", nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_invite_tokens_challenge", "invite_tokens", ["challenge_id"])

    # --- badges ---
    op.create_table(
        "badges",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("challenge_id", sa.Uuid(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("tier_id", sa.String(50), nullable=True),
        sa.Column("image_data", sa.LargeBinary(), nullable=False),
        sa.Column("content_type", sa.String(50), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("idx_badges_challenge", "badges", ["challenge_id"])

    # --- users & friends ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("callsign", sa.String(20), nullable=False, unique=True),
        _timestamp("created_at"),
    )
    op.create_table(
        "friend_invites",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("token", sa.String(64), nullable=False, unique=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _timestamp("created_at"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _timestamp("used_at", nullable=True),
        sa.Column("used_by_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_table(
        "friend_requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("from_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("to_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _timestamp("requested_at"),
        _timestamp("responded_at", nullable=True),
    )
    op.create_index("idx_friend_requests_to_status", "friend_requests", ["to_user_id", "status"])
    op.create_index("idx_friend_requests_from_status", "friend_requests", ["from_user_id", "status"])
    op.create_table(
        "friendships",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("friend_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("user_id", "friend_id", name="friendships_user_id_friend_id_key"),
    )


def downgrade() -> None:
    """Drop all tables in dependency order."""
    for table in (
        "friendships",
        "friend_requests",
        "friend_invites",
        "users",
        "badges",
        "invite_tokens",
        "progress",
        "challenge_participants",
        "participants",
        "challenges",
    ):
        op.drop_table(table)
