"""User ORM - minimal projection of the user entity.

The user lifecycle belongs to another layer; repostore only writes the cached
num_stars counter.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from repostore.db.base import Base


class User(Base):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    lower_name: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    num_stars: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
