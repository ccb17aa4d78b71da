"""Relation Counters - find-or-create relation rows and recompute cached counters from them.

Invariants:
    - insert_relation returns True only when this call created the row
    - Counters are written as UPDATE ... SET col = (SELECT COUNT(*) ...), never as deltas
    - Every helper runs on the caller's session; the caller owns the transaction

Design Decisions:
    - INSERT ... ON CONFLICT DO NOTHING on PostgreSQL and SQLite: the unique constraint
      decides the winner of concurrent inserts, the row count reports it
    - Other dialects: SAVEPOINT + IntegrityError, same contract
"""

from sqlalchemy import func, insert, inspect, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from repostore.infrastructure.database import stage
from repostore.models.repository import Repository
from repostore.models.star import Star
from repostore.models.user import User
from repostore.models.watch import Watch

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def insert_relation(db: AsyncSession, model: type, **values: int) -> bool:
    """Insert a relation row unless an identical one exists. True if a row was created."""
    # Keyed by Column: attribute names may differ from column names (star.uid)
    columns = inspect(model).columns
    row = {columns[key]: value for key, value in values.items()}

    dialect_insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if dialect_insert is not None:
        stmt = dialect_insert(model.__table__).values(row).on_conflict_do_nothing()
        result = await db.execute(stmt)
        return result.rowcount > 0

    existing = await db.execute(select(model).filter_by(**values).limit(1))
    if existing.scalar_one_or_none() is not None:
        return False
    try:
        async with db.begin_nested():
            await db.execute(insert(model.__table__).values(row))
    except IntegrityError:
        return False
    return True


def _count(model: type, column, value: int):
    return (
        select(func.count())
        .select_from(model)
        .where(column == value)
        .scalar_subquery()
    )


async def recount_stars(db: AsyncSession, user_id: int, repo_id: int) -> None:
    """Recompute repository.num_stars and user.num_stars from the star table."""
    with stage('update "repository.num_stars"'):
        await db.execute(
            update(Repository)
            .where(Repository.id == repo_id)
            .values(num_stars=_count(Star, Star.repo_id, repo_id))
            .execution_options(synchronize_session=False)
        )

    with stage('update "user.num_stars"'):
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(num_stars=_count(Star, Star.user_id, user_id))
            .execution_options(synchronize_session=False)
        )


async def recount_watches(db: AsyncSession, repo_id: int) -> None:
    """Recompute repository.num_watches from the watch table."""
    with stage('update "repository.num_watches"'):
        await db.execute(
            update(Repository)
            .where(Repository.id == repo_id)
            .values(num_watches=_count(Watch, Watch.repo_id, repo_id))
            .execution_options(synchronize_session=False)
        )
