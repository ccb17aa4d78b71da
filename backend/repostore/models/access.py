"""Access ORM - collaboration grants of a user on a repository.

Invariants:
    - (user_id, repo_id) is unique; mode holds an AccessMode integer
"""

from sqlalchemy import BigInteger, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repostore.core.domain_types import AccessMode
from repostore.db.base import Base


class Access(Base):
    """Effective access level of a user on a repository."""
    __tablename__ = "access"
    __table_args__ = (
        UniqueConstraint("user_id", "repo_id", name="uq_access_user_repo"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    repo_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    mode: Mapped[int] = mapped_column(Integer, nullable=False, default=int(AccessMode.NONE))
