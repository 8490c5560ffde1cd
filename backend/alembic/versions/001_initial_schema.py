"""Initial schema: users, questions, exams, exam configs, system settings

Revision ID: 001
Revises: 
Create Date: 2026-10-18 10:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("banned_reason", sa.String(500), nullable=True),
        sa.Column("banned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_token_hash", sa.String(64), nullable=True),
        sa.Column("reset_token_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_reset_token_hash", "users", ["reset_token_hash"])

    op.create_table(
        "questions",
        sa.Column("pk", sa.Uuid(), primary_key=True),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("option_a", sa.Text(), nullable=False),
        sa.Column("option_b", sa.Text(), nullable=False),
        sa.Column("option_c", sa.Text(), nullable=False),
        sa.Column("option_d", sa.Text(), nullable=False),
        sa.Column("correct", sa.String(1), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("category", sa.String(200), nullable=True),
        sa.Column("topic", sa.String(200), nullable=True),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column("source", sa.String(200), nullable=True),
        sa.Column("increment", sa.Integer(), nullable=True),
        sa.Column("increment_position", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("correct IN ('a', 'b', 'c', 'd')", name="ck_questions_correct"),
        sa.CheckConstraint(
            "increment IS NULL OR increment IN (1, 2, 3)", name="ck_questions_increment"
        ),
    )
    op.create_index("ix_questions_id", "questions", ["id"], unique=True)
    op.create_index("ix_questions_deleted_status", "questions", ["is_deleted", "status"])
    op.create_index("ix_questions_increment", "questions", ["increment"])
    op.create_index("ix_questions_category", "questions", ["category"])

    op.create_table(
        "exam_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("mode", sa.String(20), nullable=False, server_default="timed"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("client_session_id", sa.String(100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "user_id", "client_session_id", name="uq_exam_sessions_user_client_session"
        ),
    )
    op.create_index("ix_exam_sessions_user_created", "exam_sessions", ["user_id", "created_at"])
    op.create_index("ix_exam_sessions_created", "exam_sessions", ["created_at"])

    op.create_table(
        "exam_answers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "exam_session_id",
            sa.Uuid(),
            sa.ForeignKey("exam_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("selected", sa.String(1), nullable=True),
        sa.Column("correct", sa.String(1), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_exam_answers_session", "exam_answers", ["exam_session_id"])
    op.create_index(
        "ix_exam_answers_question_correct", "exam_answers", ["question_id", "is_correct"]
    )

    op.create_table(
        "exam_configs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("increments", sa.JSON(), nullable=False),
        sa.Column("question_count", sa.Integer(), nullable=False),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True),
        sa.Column("pass_mark_percent", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("randomize_questions", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("randomize_answers", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), primary_key=True, server_default="1"),
        sa.Column("system_name", sa.String(200), nullable=False, server_default="PROVIQUIZ"),
        sa.Column("logo_url", sa.String(2048), nullable=True),
        sa.Column("exam_rules", sa.Text(), nullable=True),
        sa.Column("passing_criteria", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("question_randomization", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("maintenance_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("maintenance_message", sa.Text(), nullable=True),
        sa.Column("locked_increments", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column(
            "updated_by_user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("system_settings")
    op.drop_table("exam_configs")
    op.drop_index("ix_exam_answers_question_correct", table_name="exam_answers")
    op.drop_index("ix_exam_answers_session", table_name="exam_answers")
    op.drop_table("exam_answers")
    op.drop_index("ix_exam_sessions_created", table_name="exam_sessions")
    op.drop_index("ix_exam_sessions_user_created", table_name="exam_sessions")
    op.drop_table("exam_sessions")
    op.drop_index("ix_questions_category", table_name="questions")
    op.drop_index("ix_questions_increment", table_name="questions")
    op.drop_index("ix_questions_deleted_status", table_name="questions")
    op.drop_index("ix_questions_id", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_users_reset_token_hash", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
