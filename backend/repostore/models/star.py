"""Star ORM - a user starring a repository.

Invariants:
    - (uid, repo_id) is unique; rows are never updated
    - Row count per repo_id / uid is the source of truth for repository.num_stars / user.num_stars
"""

from sqlalchemy import BigInteger, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repostore.db.base import Base


class Star(Base):
    """Star relation between a user and a repository."""
    __tablename__ = "star"
    __table_args__ = (
        UniqueConstraint("uid", "repo_id", name="uq_star_user_repo"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column("uid", BigInteger, nullable=False, index=True)
    repo_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
