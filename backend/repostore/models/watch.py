"""Watch ORM - a user watching a repository.

Invariants:
    - (user_id, repo_id) is unique
    - Row count per repo_id is the source of truth for repository.num_watches
"""

from sqlalchemy import BigInteger, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repostore.db.base import Base


class Watch(Base):
    """Watch relation between a user and a repository."""
    __tablename__ = "watch"
    __table_args__ = (
        UniqueConstraint("user_id", "repo_id", name="uq_watch_user_repo"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    repo_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Watch user_id={self.user_id} repo_id={self.repo_id}>"
