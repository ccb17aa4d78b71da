"""ORM Models - SQLAlchemy declarative models for repositories and their relations.

Invariants:
    - All models inherit from Base (db/base.py)
    - Star and Watch are unique per (user, repository) pair

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all or autogenerate
"""

from repostore.models.repository import Repository  # noqa: F401
from repostore.models.star import Star  # noqa: F401
from repostore.models.watch import Watch  # noqa: F401
from repostore.models.user import User  # noqa: F401
from repostore.models.access import Access  # noqa: F401
