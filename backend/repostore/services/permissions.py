"""Permissions Store - default AccessOracle backed by the access table.

Invariants:
    - repo_id <= 0 -> NONE
    - Public repositories give everyone at least READ; anonymous users (user_id <= 0) get only that
    - The owner always gets OWNER
    - Otherwise the access row's mode, or the default when no row exists
    - Lookup failures are logged and answered with the default mode
"""

import logging

from sqlalchemy import select

from repostore.core.domain_types import AccessMode, RepoId, UserId
from repostore.core.errors import DatabaseError
from repostore.core.repository_protocols import AccessModeOptions
from repostore.infrastructure.database import DatabaseSessionManager
from repostore.models.access import Access

logger = logging.getLogger(__name__)


class PermissionsStore:
    """Answers "does user X hold at least level L on repository R"."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db_manager = db_manager

    async def access_mode(
        self, user_id: UserId, repo_id: RepoId, opts: AccessModeOptions,
    ) -> AccessMode:
        if repo_id <= 0:
            return AccessMode.NONE

        mode = AccessMode.NONE if opts.private else AccessMode.READ
        if user_id <= 0:
            return mode
        if user_id == opts.owner_id:
            return AccessMode.OWNER

        try:
            async with self._db_manager.session() as db:
                result = await db.execute(
                    select(Access.mode)
                    .where(Access.user_id == user_id)
                    .where(Access.repo_id == repo_id)
                )
                granted = result.scalar_one_or_none()
        except DatabaseError as e:
            logger.error(
                f"Failed to get access: {e.message}",
                extra={"user_id": user_id, "repo_id": repo_id, "error_code": e.code},
            )
            return mode

        if granted is None:
            return mode
        return AccessMode(granted)

    async def authorize(
        self,
        user_id: UserId,
        repo_id: RepoId,
        desired: AccessMode,
        opts: AccessModeOptions,
    ) -> bool:
        return desired <= await self.access_mode(user_id, repo_id, opts)
