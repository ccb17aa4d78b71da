"""Initial schema - repository, star, watch, user, access.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("lower_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("num_stars", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_user_lower_name", "user", ["lower_name"])

    op.create_table(
        "repository",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.BigInteger, nullable=False),
        sa.Column("lower_name", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("website", sa.String(2048), nullable=False, server_default=""),
        sa.Column("default_branch", sa.String(255), nullable=False, server_default=""),
        sa.Column("size", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("is_private", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_bare", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_mirror", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("enable_wiki", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("enable_issues", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("enable_pulls", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_fork", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("fork_id", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("num_watches", sa.Integer, nullable=False, server_default="0"),
        sa.Column("num_stars", sa.Integer, nullable=False, server_default="0"),
        sa.Column("num_forks", sa.Integer, nullable=False, server_default="0"),
        sa.Column("num_open_issues", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_unix", sa.BigInteger, nullable=False),
        sa.Column("updated_unix", sa.BigInteger, nullable=False),
        sa.UniqueConstraint("owner_id", "lower_name", name="uq_repository_owner_lower_name"),
    )
    op.create_index("ix_repository_owner_id", "repository", ["owner_id"])
    op.create_index("ix_repository_lower_name", "repository", ["lower_name"])
    op.create_index("ix_repository_name", "repository", ["name"])
    op.create_index("ix_repository_fork_id", "repository", ["fork_id"])
    op.create_index("ix_repository_updated_unix", "repository", ["updated_unix"])

    op.create_table(
        "star",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uid", sa.BigInteger, nullable=False),
        sa.Column("repo_id", sa.BigInteger, nullable=False),
        sa.UniqueConstraint("uid", "repo_id", name="uq_star_user_repo"),
    )
    op.create_index("ix_star_uid", "star", ["uid"])
    op.create_index("ix_star_repo_id", "star", ["repo_id"])

    op.create_table(
        "watch",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger, nullable=False),
        sa.Column("repo_id", sa.BigInteger, nullable=False),
        sa.UniqueConstraint("user_id", "repo_id", name="uq_watch_user_repo"),
    )
    op.create_index("ix_watch_user_id", "watch", ["user_id"])
    op.create_index("ix_watch_repo_id", "watch", ["repo_id"])

    op.create_table(
        "access",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger, nullable=False),
        sa.Column("repo_id", sa.BigInteger, nullable=False),
        sa.Column("mode", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("user_id", "repo_id", name="uq_access_user_repo"),
    )
    op.create_index("ix_access_user_id", "access", ["user_id"])
    op.create_index("ix_access_repo_id", "access", ["repo_id"])


def downgrade() -> None:
    op.drop_table("access")
    op.drop_table("watch")
    op.drop_table("star")
    op.drop_table("repository")
    op.drop_table("user")
