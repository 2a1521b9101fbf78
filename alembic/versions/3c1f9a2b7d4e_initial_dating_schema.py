"""Initial dating schema

Revision ID: 3c1f9a2b7d4e
Revises:
Create Date: 2026-10-17 09:12:44.518302

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d4e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "dating_profiles",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("account_id", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("min_age", sa.Integer(), nullable=False, server_default=sa.text("18")),
        sa.Column("max_age", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("show_me", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("completeness", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("interests", sa.JSON(), nullable=False),
        sa.Column("course", sa.String(150), nullable=True),
        sa.Column("year_of_study", sa.Integer(), nullable=True),
        sa.Column("faculty", sa.String(150), nullable=True),
        sa.Column("relationship_goal", sa.String(50), nullable=True),
        sa.Column("instagram_handle", sa.String(100), nullable=True),
        sa.Column("prompts", sa.JSON(), nullable=False),
        sa.Column("super_likes_remaining", sa.Integer(), nullable=False, server_default=sa.text("3")),
        sa.Column("last_super_like_reset", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dating_profiles_account_id", "dating_profiles", ["account_id"], unique=True)
    op.create_index("ix_dating_profiles_age", "dating_profiles", ["age"])
    op.create_index("ix_dating_profiles_gender", "dating_profiles", ["gender"])
    op.create_index("ix_dating_profiles_show_me", "dating_profiles", ["show_me"])

    op.create_table(
        "dating_seeking_genders",
        sa.Column("profile_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), primary_key=True),
        sa.Column("gender", sa.String(20), primary_key=True),
    )

    op.create_table(
        "dating_photos",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("profile_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("is_main", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dating_photos_profile_id", "dating_photos", ["profile_id"])

    op.create_table(
        "dating_swipes",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("actor_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("target_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("actor_id", "target_id", name="uq_dating_swipe_pair"),
    )
    op.create_index("ix_dating_swipes_actor_id", "dating_swipes", ["actor_id"])
    op.create_index("ix_dating_swipes_target_id", "dating_swipes", ["target_id"])

    op.create_table(
        "dating_matches",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("profile1_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("profile2_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("matched_at", sa.DateTime(), nullable=False),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("profile1_id", "profile2_id", name="uq_dating_match_pair"),
        sa.CheckConstraint("profile1_id < profile2_id", name="ck_dating_match_ordered"),
    )
    op.create_index("ix_dating_matches_profile1_id", "dating_matches", ["profile1_id"])
    op.create_index("ix_dating_matches_profile2_id", "dating_matches", ["profile2_id"])

    op.create_table(
        "dating_blocks",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("blocker_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("blocked_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_dating_block_pair"),
    )
    op.create_index("ix_dating_blocks_blocker_id", "dating_blocks", ["blocker_id"])
    op.create_index("ix_dating_blocks_blocked_id", "dating_blocks", ["blocked_id"])

    op.create_table(
        "dating_messages",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("match_id", sa.String(50), sa.ForeignKey("dating_matches.id"), nullable=False),
        sa.Column("sender_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dating_messages_match_id", "dating_messages", ["match_id"])
    op.create_index("ix_dating_messages_created_at", "dating_messages", ["created_at"])

    op.create_table(
        "dating_reports",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("reporter_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("reported_id", sa.String(50), sa.ForeignKey("dating_profiles.id"), nullable=False),
        sa.Column("reason", sa.String(50), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dating_reports_reporter_id", "dating_reports", ["reporter_id"])
    op.create_index("ix_dating_reports_reported_id", "dating_reports", ["reported_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("dating_reports")
    op.drop_table("dating_messages")
    op.drop_table("dating_blocks")
    op.drop_table("dating_matches")
    op.drop_table("dating_swipes")
    op.drop_table("dating_photos")
    op.drop_table("dating_seeking_genders")
    op.drop_table("dating_profiles")
