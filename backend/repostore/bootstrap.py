"""Composition Root - builds the store graph once per process and hands it to callers.

Invariants:
    - Exactly one DatabaseSessionManager per Services instance; every collaborator receives it explicitly
    - No module-level store handle: callers keep the Services object they were given
"""

import logging
from dataclasses import dataclass

from repostore.config import Settings, get_settings
from repostore.core.repository_protocols import NameValidator
from repostore.core.name_rules import is_repo_name_allowed
from repostore.infrastructure.database import DatabaseSessionManager
from repostore.infrastructure.observability import setup_logging
from repostore.services.permissions import PermissionsStore
from repostore.services.repositories import RepositoriesStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired collaborators for HTTP handlers and background jobs."""
    db: DatabaseSessionManager
    perms: PermissionsStore
    repos: RepositoriesStore

    async def dispose(self) -> None:
        await self.db.dispose()
        logger.info("repostore services disposed")


def build_services(
    settings: Settings | None = None,
    name_validator: NameValidator = is_repo_name_allowed,
    configure_logging: bool = True,
) -> Services:
    """Construct the session manager, permission oracle and repositories store."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    perms = PermissionsStore(db)
    repos = RepositoriesStore(db, perms, name_validator=name_validator)
    logger.info("repostore services initialized")
    return Services(db=db, perms=perms, repos=repos)
