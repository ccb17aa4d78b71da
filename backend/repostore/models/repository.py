"""Repository ORM - the repository record and its denormalized counters.

Invariants:
    - lower_name == name.lower(); (owner_id, lower_name) is unique
    - num_stars / num_watches are caches recomputed from the star / watch tables
    - created_unix set on insert; updated_unix set on insert and on every UPDATE statement
    - fork_id is 0 when the repository is not a fork

Design Decisions:
    - Timestamps stored as epoch seconds; created/updated expose local-time datetimes
    - updated_unix uses a column onupdate so Core update() statements refresh it too
"""

import time
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repostore.db.base import Base


def now_unix() -> int:
    return int(time.time())


class Repository(Base):
    """Repository record owned by a user or organization."""
    __tablename__ = "repository"
    __table_args__ = (
        UniqueConstraint("owner_id", "lower_name", name="uq_repository_owner_lower_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    lower_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    website: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    default_branch: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_bare: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_mirror: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enable_wiki: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_issues: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_pulls: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_fork: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fork_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, index=True)

    # Cached aggregates
    num_watches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_stars: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_forks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_open_issues: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_unix: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_unix)
    updated_unix: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_unix, onupdate=now_unix, index=True,
    )

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.created_unix).astimezone()

    @property
    def updated(self) -> datetime:
        return datetime.fromtimestamp(self.updated_unix).astimezone()

    def __repr__(self) -> str:
        return f"<Repository id={self.id} owner_id={self.owner_id} name={self.name!r}>"
