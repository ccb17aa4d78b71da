"""DatabaseSessionManager - rollback, error mapping, stage labels, health check.

Invariants:
    - transaction() commits on clean exit and rolls back on any exception
    - SQLAlchemy exceptions leaving session() become DatabaseError
    - stage() prefixes nested labels outermost first
"""

import logging

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from repostore.core.errors import DatabaseError
from repostore.infrastructure.database import DatabaseSessionManager, stage
from repostore.models.watch import Watch


async def _watch_count(db_manager) -> int:
    async with db_manager.session() as db:
        return len((await db.execute(select(Watch))).scalars().all())


async def test_transaction_commits(db_manager):
    async with db_manager.transaction() as db:
        db.add(Watch(user_id=1, repo_id=1))
    assert await _watch_count(db_manager) == 1


async def test_transaction_rolls_back_on_error(db_manager):
    with pytest.raises(RuntimeError):
        async with db_manager.transaction() as db:
            db.add(Watch(user_id=1, repo_id=1))
            await db.flush()
            raise RuntimeError("abort")
    assert await _watch_count(db_manager) == 0


async def test_unique_violation_maps_to_database_error(db_manager):
    async with db_manager.transaction() as db:
        db.add(Watch(user_id=1, repo_id=1))

    with pytest.raises(DatabaseError) as exc_info:
        async with db_manager.transaction() as db:
            db.add(Watch(user_id=1, repo_id=1))
    assert exc_info.value.operation == "commit"
    assert exc_info.value.http_status == 503


async def test_bad_sql_maps_to_database_error(db_manager):
    with pytest.raises(DatabaseError):
        async with db_manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))


def test_stage_wraps_sqlalchemy_errors():
    with pytest.raises(DatabaseError) as exc_info:
        with stage("upsert"):
            raise SQLAlchemyError("boom")
    assert exc_info.value.operation == "upsert"
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


def test_stage_nests_labels():
    with pytest.raises(DatabaseError) as exc_info:
        with stage("watch"):
            with stage("upsert"):
                raise SQLAlchemyError("boom")
    assert exc_info.value.operation == "watch: upsert"
    assert exc_info.value.detail == "boom"


def test_stage_leaves_domain_errors_alone():
    with pytest.raises(ValueError):
        with stage("create"):
            raise ValueError("not a store failure")


async def test_health_check(db_manager):
    assert await db_manager.health_check() is True


async def test_health_check_unreachable(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nope.db'}",
    )
    try:
        assert await manager.health_check() is False
    finally:
        await manager.dispose()


async def test_stage_failure_logged_once_with_label(db_manager, caplog):
    with caplog.at_level(logging.ERROR, logger="repostore.infrastructure.database"):
        with pytest.raises(DatabaseError):
            async with db_manager.transaction():
                with stage("watch"):
                    with stage("upsert"):
                        raise OperationalError("INSERT INTO watch", {}, Exception("locked"))

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].stage == "watch: upsert"
    assert errors[0].error_code == "DATABASE_ERROR"
