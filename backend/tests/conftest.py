"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Services are wired explicitly, the same way bootstrap.build_services wires them

Design Decisions:
    - File-backed SQLite instead of :memory:: concurrent transactions need separate connections
"""

import os

import pytest

from repostore.core.domain_types import AccessMode
from repostore.infrastructure.database import DatabaseSessionManager
from repostore.models.access import Access
from repostore.models.user import User
from repostore.services.permissions import PermissionsStore
from repostore.services.repositories import RepositoriesStore

# Ensure tests never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'repostore.db'}")
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
def perms(db_manager):
    return PermissionsStore(db_manager)


@pytest.fixture
def repos(db_manager, perms):
    return RepositoriesStore(db_manager, perms)


@pytest.fixture
def seed_users(db_manager):
    """Insert users by id: await seed_users(1, 2, 3)."""
    async def _seed(*user_ids: int) -> None:
        async with db_manager.transaction() as db:
            for user_id in user_ids:
                db.add(User(id=user_id, name=f"user{user_id}", lower_name=f"user{user_id}"))
    return _seed


@pytest.fixture
def grant_access(db_manager):
    """Insert an access row: await grant_access(user_id, repo_id, AccessMode.READ)."""
    async def _grant(user_id: int, repo_id: int, mode: AccessMode) -> None:
        async with db_manager.transaction() as db:
            db.add(Access(user_id=user_id, repo_id=repo_id, mode=int(mode)))
    return _grant
