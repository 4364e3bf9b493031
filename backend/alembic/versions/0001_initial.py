"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# SQLAlchemy persists Python enums by member name
user_role = sa.Enum("JUNIOR", "MENTOR", "ADMIN", name="userrole")
doubt_status = sa.Enum("OPEN", "ANSWERED", "RESOLVED", "CLOSED", name="doubtstatus")
admin_action_type = sa.Enum(
    "APPROVE_MENTOR",
    "REJECT_MENTOR",
    "DELETE_DOUBT",
    "DELETE_ANSWER",
    "DELETE_COMMENT",
    "BAN_USER",
    "UNBAN_USER",
    "DELETE_JUNIOR_POST",
    name="adminactiontype",
)


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("bio", sa.String(length=500), nullable=False),
        sa.Column("is_mentor_approved", sa.Boolean(), nullable=False),
        sa.Column("banned_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index(
        "ix_users_role_approved", "users", ["role", "is_mentor_approved"]
    )

    op.create_table(
        "mentor_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("badge", sa.String(length=100), nullable=False),
        sa.Column("expertise_tags", sa.JSON(), nullable=True),
        sa.Column("total_upvotes", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_mentor_profiles_id", "mentor_profiles", ["id"])

    op.create_table(
        "doubts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("status", doubt_status, nullable=False),
        sa.Column("junior_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["junior_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_doubts_id", "doubts", ["id"])
    op.create_index("ix_doubts_junior", "doubts", ["junior_id"])
    op.create_index("ix_doubts_status", "doubts", ["status"])
    op.create_index("ix_doubts_created", "doubts", ["created_at"])

    op.create_table(
        "answers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("upvote_count", sa.Integer(), nullable=False),
        sa.Column("doubt_id", sa.Integer(), nullable=False),
        sa.Column("mentor_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["doubt_id"], ["doubts.id"]),
        sa.ForeignKeyConstraint(["mentor_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_answers_id", "answers", ["id"])
    op.create_index("ix_answers_doubt", "answers", ["doubt_id"])
    op.create_index("ix_answers_mentor", "answers", ["mentor_id"])
    op.create_index("ix_answers_upvotes", "answers", ["upvote_count"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("doubt_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("parent_comment_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["doubt_id"], ["doubts.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["comments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_id", "comments", ["id"])
    op.create_index(
        "ix_comments_doubt_parent", "comments", ["doubt_id", "parent_comment_id"]
    )
    op.create_index("ix_comments_user", "comments", ["user_id"])

    op.create_table(
        "junior_space_posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("junior_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["junior_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_junior_space_posts_id", "junior_space_posts", ["id"])
    op.create_index("ix_junior_posts_junior", "junior_space_posts", ["junior_id"])
    op.create_index("ix_junior_posts_created", "junior_space_posts", ["created_at"])

    op.create_table(
        "upvotes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("answer_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["answer_id"], ["answers.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "answer_id", name="uq_upvote_user_answer"),
    )
    op.create_index("ix_upvotes_id", "upvotes", ["id"])
    op.create_index("ix_upvotes_answer", "upvotes", ["answer_id"])

    # Ledger rows keep plain ids so they survive deletion of admin or target
    op.create_table(
        "admin_actions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("admin_id", sa.Integer(), nullable=False),
        sa.Column("action_type", admin_action_type, nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_actions_id", "admin_actions", ["id"])
    op.create_index("ix_admin_actions_admin", "admin_actions", ["admin_id"])
    op.create_index("ix_admin_actions_created", "admin_actions", ["created_at"])


def downgrade():
    op.drop_table("admin_actions")
    op.drop_table("upvotes")
    op.drop_table("junior_space_posts")
    op.drop_table("comments")
    op.drop_table("answers")
    op.drop_table("doubts")
    op.drop_table("mentor_profiles")
    op.drop_table("users")
    # Postgres keeps named enum types after their tables are gone
    bind = op.get_bind()
    for enum_type in (admin_action_type, doubt_status, user_role):
        enum_type.drop(bind, checkfirst=True)
