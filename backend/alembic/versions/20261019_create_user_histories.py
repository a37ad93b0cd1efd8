"""Create users, topics, posts and user_histories.

Revision ID: 20261019_create_user_histories
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = "20261019_create_user_histories"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    table_names = inspect(bind).get_table_names()

    if "users" not in table_names:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("username", sa.String(length=60), nullable=False),
            sa.Column("username_lower", sa.String(length=60), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("hashed_password", sa.String(length=255), nullable=False),
            sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_moderator", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("username"),
            sa.UniqueConstraint("email"),
        )
        op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
        op.create_index(op.f("ix_users_username_lower"), "users", ["username_lower"], unique=True)

    if "topics" not in table_names:
        op.create_table(
            "topics",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )

    if "posts" not in table_names:
        op.create_table(
            "posts",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("topic_id", sa.Integer(), nullable=True),
            sa.Column("user_id", sa.Integer(), nullable=True),
            sa.Column("raw", sa.Text(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_posts_topic_id"), "posts", ["topic_id"], unique=False)

    if "user_histories" not in table_names:
        op.create_table(
            "user_histories",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("action", sa.Integer(), nullable=False),
            sa.Column("acting_user_id", sa.Integer(), nullable=True),
            sa.Column("target_user_id", sa.Integer(), nullable=True),
            sa.Column("post_id", sa.Integer(), nullable=True),
            sa.Column("topic_id", sa.Integer(), nullable=True),
            sa.Column("details", sa.Text(), nullable=True),
            sa.Column("context", sa.String(length=255), nullable=True),
            sa.Column("ip_address", sa.String(length=255), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("subject", sa.Text(), nullable=True),
            sa.Column("previous_value", sa.Text(), nullable=True),
            sa.Column("new_value", sa.Text(), nullable=True),
            sa.Column("custom_type", sa.String(length=255), nullable=True),
            sa.Column("admin_only", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["acting_user_id"], ["users.id"]),
            sa.ForeignKeyConstraint(["target_user_id"], ["users.id"]),
            sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
            sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.CheckConstraint("admin_only = (action IN (3))", name="ck_user_histories_admin_only"),
        )
        op.create_index("ix_user_histories_action_id", "user_histories", ["action", "id"])
        op.create_index(
            "ix_user_histories_acting_user_id_action_id",
            "user_histories",
            ["acting_user_id", "action", "id"],
        )
        op.create_index("ix_user_histories_subject_id", "user_histories", ["subject", "id"])
        op.create_index(
            "ix_user_histories_target_user_id_id", "user_histories", ["target_user_id", "id"]
        )


def downgrade() -> None:
    table_names = inspect(op.get_bind()).get_table_names()

    if "user_histories" in table_names:
        op.drop_index("ix_user_histories_target_user_id_id", table_name="user_histories")
        op.drop_index("ix_user_histories_subject_id", table_name="user_histories")
        op.drop_index("ix_user_histories_acting_user_id_action_id", table_name="user_histories")
        op.drop_index("ix_user_histories_action_id", table_name="user_histories")
        op.drop_table("user_histories")
    if "posts" in table_names:
        op.drop_index(op.f("ix_posts_topic_id"), table_name="posts")
        op.drop_table("posts")
    if "topics" in table_names:
        op.drop_table("topics")
    if "users" in table_names:
        op.drop_index(op.f("ix_users_username_lower"), table_name="users")
        op.drop_index(op.f("ix_users_id"), table_name="users")
        op.drop_table("users")
