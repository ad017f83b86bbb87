"""Initial Daybook schema: users, diary, moods, habits, media and insights."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20251018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _owner_column() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="cascade"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("display_name", sa.String(length=120), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
    )

    op.create_table(
        "diary_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        _owner_column(),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("mood", sa.String(length=16), nullable=True),
        sa.Column("mood_intensity", sa.Integer(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_diary_entries_user_date", "diary_entries", ["user_id", "date"])

    op.create_table(
        "mood_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        _owner_column(),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("mood", sa.String(length=16), nullable=False),
        sa.Column("mood_intensity", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "mood_intensity >= 1 AND mood_intensity <= 10",
            name="ck_mood_history_intensity",
        ),
    )
    op.create_index("ix_mood_history_user_date", "mood_history", ["user_id", "date"])

    op.create_table(
        "habits",
        sa.Column("id", sa.Uuid(), nullable=False),
        _owner_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=7), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=16), server_default="active", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_user_status", "habits", ["user_id", "status"])

    op.create_table(
        "habit_completions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "habit_id",
            sa.Uuid(),
            sa.ForeignKey("habits.id", ondelete="cascade"),
            nullable=False,
        ),
        _owner_column(),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_habit_completions_habit_user_date",
        "habit_completions",
        ["habit_id", "user_id", "date"],
    )

    op.create_table(
        "media_files",
        sa.Column("id", sa.Uuid(), nullable=False),
        _owner_column(),
        sa.Column(
            "diary_entry_id",
            sa.Uuid(),
            sa.ForeignKey("diary_entries.id", ondelete="set null"),
            nullable=True,
        ),
        sa.Column("file_key", sa.String(length=512), nullable=False),
        sa.Column("file_url", sa.String(length=1024), nullable=False),
        sa.Column("file_type", sa.String(length=16), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=True),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_media_files_user_uploaded", "media_files", ["user_id", "uploaded_at"])

    op.create_table(
        "mood_insights",
        sa.Column("id", sa.Uuid(), nullable=False),
        _owner_column(),
        sa.Column("period", sa.String(length=8), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("average_mood_score", sa.Numeric(4, 2), nullable=True),
        sa.Column("dominant_mood", sa.String(length=50), nullable=True),
        sa.Column("mood_distribution", sa.JSON(), nullable=True),
        sa.Column("top_habits_correlation", sa.JSON(), nullable=True),
        sa.Column("insights", sa.Text(), nullable=True),
        sa.Column(
            "generated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_mood_insights_user_period",
        "mood_insights",
        ["user_id", "period", "period_start"],
    )


def downgrade() -> None:
    op.drop_index("ix_mood_insights_user_period", table_name="mood_insights")
    op.drop_table("mood_insights")
    op.drop_index("ix_media_files_user_uploaded", table_name="media_files")
    op.drop_table("media_files")
    op.drop_index("ix_habit_completions_habit_user_date", table_name="habit_completions")
    op.drop_table("habit_completions")
    op.drop_index("ix_habits_user_status", table_name="habits")
    op.drop_table("habits")
    op.drop_index("ix_mood_history_user_date", table_name="mood_history")
    op.drop_table("mood_history")
    op.drop_index("ix_diary_entries_user_date", table_name="diary_entries")
    op.drop_table("diary_entries")
    op.drop_table("users")
