"""Initial migration – create player, play_time, server_ban, server_unban tables.

Revision ID: 001
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── player ────────────────────────────────────────────────────────
    op.create_table(
        "player",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("last_seen_user_name", sa.String(32), nullable=False),
        sa.Column("last_seen_address", postgresql.INET(), nullable=True),
        sa.Column("last_seen_hwid", sa.LargeBinary(), nullable=True),
        sa.Column("first_seen_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_seen_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_player_last_seen_user_name", "player", ["last_seen_user_name"])

    # ── play_time ─────────────────────────────────────────────────────
    op.create_table(
        "play_time",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("player_id", sa.Uuid(), nullable=False),
        sa.Column("tracker", sa.String(64), nullable=False),
        sa.Column("time_spent", sa.Interval(), nullable=False),
        sa.UniqueConstraint("player_id", "tracker", name="uq_play_time_player_tracker"),
    )

    # ── server_ban ────────────────────────────────────────────────────
    op.create_table(
        "server_ban",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("player_user_id", sa.Uuid(), nullable=True),
        sa.Column("address", postgresql.INET(), nullable=True),
        sa.Column("hwid", sa.LargeBinary(), nullable=True),
        sa.Column("ban_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expiration_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("round_id", sa.Integer(), nullable=True),
        sa.Column("playtime_at_note", sa.Interval(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("severity", sa.String(10), nullable=False),
        sa.Column("banning_admin", sa.Uuid(), nullable=True),
        sa.CheckConstraint(
            "player_user_id IS NOT NULL OR address IS NOT NULL OR hwid IS NOT NULL",
            name="ck_server_ban_has_criteria",
        ),
    )
    op.create_index("idx_server_ban_player", "server_ban", ["player_user_id"])
    op.create_index(
        "idx_server_ban_address",
        "server_ban",
        ["address"],
        postgresql_using="gist",
        postgresql_ops={"address": "inet_ops"},
    )
    op.create_index("idx_server_ban_hwid", "server_ban", ["hwid"])

    # ── server_unban ──────────────────────────────────────────────────
    op.create_table(
        "server_unban",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "ban_id",
            sa.BigInteger(),
            sa.ForeignKey("server_ban.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("unbanning_admin", sa.Uuid(), nullable=True),
        sa.Column("unban_time", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("server_unban")
    op.drop_index("idx_server_ban_hwid", table_name="server_ban")
    op.drop_index("idx_server_ban_address", table_name="server_ban")
    op.drop_index("idx_server_ban_player", table_name="server_ban")
    op.drop_table("server_ban")
    op.drop_table("play_time")
    op.drop_index("idx_player_last_seen_user_name", table_name="player")
    op.drop_table("player")
