"""Database Session Manager - async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() is the atomic unit: commit on clean exit, rollback on any exception
    - All SQLAlchemy exceptions leaving a session are mapped to DatabaseError (core/errors.py)
    - Every DatabaseError leaving a session is logged at ERROR with its stage label
    - One manager per process, constructed by the composition root and passed explicitly

Design Decisions:
    - No module-level singleton: collaborators receive the manager through their constructor
    - expire_on_commit=False: rows returned from a closed session keep their loaded attributes
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Iterator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from repostore.core.errors import DatabaseError
from repostore.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        # SQLite connections are not pooled by size
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        except DatabaseError as e:
            # Already labelled by stage(); logged once here with the full label
            await session.rollback()
            logger.error(
                f"DB {e.operation} failed: {e.detail}",
                extra={"stage": e.operation, "error_code": e.code},
            )
            raise
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session inside one atomic unit."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def create_all(self) -> None:
        """Create every table known to Base.metadata (scripts and tests)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


@contextmanager
def stage(label: str) -> Iterator[None]:
    """Label store failures raised inside the block with the step that failed.

    Nested labels are joined outermost first, e.g. "watch: upsert".
    """
    try:
        yield
    except DatabaseError as e:
        raise DatabaseError(e.detail, f"{label}: {e.operation}", e.context) from e
    except SQLAlchemyError as e:
        raise DatabaseError(str(e), label) from e
