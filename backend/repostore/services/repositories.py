"""Repositories Store - repository lifecycle, star/watch relations and repository queries.

Invariants:
    - create, star and watch each run in exactly one atomic unit (DatabaseSessionManager.transaction)
    - A new repository and its owner watch commit together or not at all
    - Relation counters are recomputed only when a relation row was actually created
    - Re-establishing an existing relation is a successful no-op
    - watch checks access BEFORE opening the atomic unit; denied calls write nothing
    - Store failures surface as DatabaseError labelled with the failing step

Design Decisions:
    - Owner bootstrap watch reuses _watch_in_tx (insert + recount) and skips the access gate,
      so a new repository starts with num_watches == 1
    - Collaborators (session manager, access oracle, name validator) injected via the constructor
"""

import logging
import re

from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from repostore.core.domain_types import AccessMode, RepoId, UserId
from repostore.core.errors import (
    ErrorContext,
    InvalidArgumentError,
    PermissionDeniedError,
    RepoAlreadyExistsError,
    RepoNotFoundError,
)
from repostore.core.name_rules import is_repo_name_allowed
from repostore.core.repository_protocols import (
    AccessModeOptions, AccessOracle, NameValidator,
)
from repostore.infrastructure.database import DatabaseSessionManager, stage
from repostore.models.access import Access
from repostore.models.repository import Repository, now_unix
from repostore.models.star import Star
from repostore.models.watch import Watch
from repostore.schemas.repository import CreateRepoOptions, WatchRepositoryOptions
from repostore.services.relation_counters import (
    insert_relation, recount_stars, recount_watches,
)

logger = logging.getLogger(__name__)

_ORDER_TERM = re.compile(r"^\s*(\w+)(?:\s+(asc|desc))?\s*$", re.IGNORECASE)


def parse_order_by(order_by: str) -> list:
    """Turn "updated_unix DESC, id" into ORDER BY clauses over repository columns."""
    columns = Repository.__table__.c
    clauses = []
    for term in order_by.split(","):
        match = _ORDER_TERM.match(term)
        if not match or match.group(1) not in columns:
            raise InvalidArgumentError(
                f"unsupported order term: {term.strip()!r}", "order_by",
            )
        column = columns[match.group(1)]
        direction = (match.group(2) or "asc").lower()
        clauses.append(column.desc() if direction == "desc" else column.asc())
    return clauses


class RepositoriesStore:
    """Persistent interface for repositories and their star/watch relations."""

    def __init__(
        self,
        db_manager: DatabaseSessionManager,
        access: AccessOracle,
        name_validator: NameValidator = is_repo_name_allowed,
    ):
        self._db_manager = db_manager
        self._access = access
        self._validate_name = name_validator

    # ─── Lifecycle ───────────────────────────────────────────────

    async def create(self, owner_id: UserId, opts: CreateRepoOptions) -> Repository:
        """Create a repository owned by owner_id; the owner watches it from the start.

        Raises NameNotAllowedError when the name is rejected and
        RepoAlreadyExistsError when the owner already has a repository with
        the same name in any letter case.
        """
        self._validate_name(opts.name)

        try:
            await self.get_by_name(owner_id, opts.name)
        except RepoNotFoundError:
            pass
        else:
            raise RepoAlreadyExistsError(
                {"owner_id": owner_id, "name": opts.name},
                ErrorContext(owner_id=owner_id),
            )

        repo = Repository(
            owner_id=owner_id,
            lower_name=opts.name.lower(),
            name=opts.name,
            description=opts.description,
            default_branch=opts.default_branch,
            is_private=opts.private,
            is_mirror=opts.mirror,
            enable_wiki=opts.enable_wiki,
            enable_issues=opts.enable_issues,
            enable_pulls=opts.enable_pulls,
            is_fork=opts.fork,
            fork_id=opts.fork_id,
        )
        async with self._db_manager.transaction() as db:
            with stage("create"):
                db.add(repo)
                try:
                    await db.flush()
                except IntegrityError as e:
                    # Lost a race against a concurrent create of the same name
                    raise RepoAlreadyExistsError(
                        {"owner_id": owner_id, "name": opts.name},
                        ErrorContext(owner_id=owner_id),
                    ) from e

            with stage("watch"):
                await self._watch_in_tx(db, owner_id, repo.id)
                await db.refresh(repo)

        logger.info(
            f"Repository created: {repo.name}",
            extra={"repo_id": repo.id, "owner_id": owner_id},
        )
        return repo

    async def touch(self, repo_id: RepoId) -> None:
        """Mark the repository as no longer bare and bump its updated time.

        Matching zero rows is not an error.
        """
        async with self._db_manager.transaction() as db:
            with stage("touch"):
                await db.execute(
                    update(Repository)
                    .where(Repository.id == repo_id)
                    .values(is_bare=False, updated_unix=now_unix())
                    .execution_options(synchronize_session=False)
                )

    # ─── Stars ───────────────────────────────────────────────────

    async def star(self, user_id: UserId, repo_id: RepoId) -> None:
        """Mark the user to star the repository."""
        async with self._db_manager.transaction() as db:
            with stage("upsert"):
                created = await insert_relation(db, Star, user_id=user_id, repo_id=repo_id)
            if not created:
                logger.debug(
                    "Star already exists",
                    extra={"user_id": user_id, "repo_id": repo_id},
                )
                return
            await recount_stars(db, user_id, repo_id)

        logger.info(
            "Repository starred",
            extra={"user_id": user_id, "repo_id": repo_id},
        )

    # ─── Watches ─────────────────────────────────────────────────

    async def watch(self, opts: WatchRepositoryOptions) -> None:
        """Mark the user to watch the repository.

        Private repositories require at least read access for anyone but the
        owner; PermissionDeniedError is raised before anything is written.
        """
        if (
            opts.repo_is_private
            and opts.user_id != opts.repo_owner_id
            and not await self._access.authorize(
                opts.user_id,
                opts.repo_id,
                AccessMode.READ,
                AccessModeOptions(owner_id=opts.repo_owner_id, private=True),
            )
        ):
            logger.warning(
                "Watch denied: no access to private repository",
                extra={"user_id": opts.user_id, "repo_id": opts.repo_id},
            )
            raise PermissionDeniedError(
                "user does not have access to the repository",
                ErrorContext(
                    repo_id=opts.repo_id,
                    user_id=opts.user_id,
                    owner_id=opts.repo_owner_id,
                ),
            )

        async with self._db_manager.transaction() as db:
            created = await self._watch_in_tx(db, opts.user_id, opts.repo_id)

        if created:
            logger.info(
                "Repository watched",
                extra={"user_id": opts.user_id, "repo_id": opts.repo_id},
            )

    async def _watch_in_tx(self, db: AsyncSession, user_id: UserId, repo_id: RepoId) -> bool:
        """Insert the watch row and recount; no access gate. True if the row was created."""
        with stage("upsert"):
            created = await insert_relation(db, Watch, user_id=user_id, repo_id=repo_id)
        if not created:
            logger.debug(
                "Watch already exists",
                extra={"user_id": user_id, "repo_id": repo_id},
            )
            return False
        await recount_watches(db, repo_id)
        return True

    async def list_watches(self, repo_id: RepoId) -> list[Watch]:
        """Return all watches of the given repository."""
        async with self._db_manager.session() as db:
            result = await db.execute(select(Watch).where(Watch.repo_id == repo_id))
            return list(result.scalars().all())

    async def has_forked_by(self, repo_id: RepoId, user_id: UserId) -> bool:
        """True if user_id owns a fork of repo_id."""
        if repo_id <= 0 or user_id <= 0:
            return False
        async with self._db_manager.session() as db:
            result = await db.execute(
                select(
                    select(Repository.id)
                    .where(Repository.owner_id == user_id)
                    .where(Repository.fork_id == repo_id)
                    .exists()
                )
            )
            return bool(result.scalar())

    # ─── Queries ─────────────────────────────────────────────────

    async def get_by_id(self, repo_id: RepoId) -> Repository:
        async with self._db_manager.session() as db:
            result = await db.execute(select(Repository).where(Repository.id == repo_id))
            repo = result.scalar_one_or_none()
        if repo is None:
            raise RepoNotFoundError({"repo_id": repo_id}, ErrorContext(repo_id=repo_id))
        return repo

    async def get_by_name(self, owner_id: UserId, name: str) -> Repository:
        """Case-insensitive lookup of a repository by owner and name."""
        async with self._db_manager.session() as db:
            result = await db.execute(
                select(Repository)
                .where(Repository.owner_id == owner_id)
                .where(Repository.lower_name == name.lower())
            )
            repo = result.scalar_one_or_none()
        if repo is None:
            raise RepoNotFoundError(
                {"owner_id": owner_id, "name": name},
                ErrorContext(owner_id=owner_id),
            )
        return repo

    def _collaborator_join(self, stmt, collaborator_id: UserId):
        return (
            stmt.join(
                Access,
                and_(
                    Access.repo_id == Repository.id,
                    Access.user_id == collaborator_id,
                ),
            )
            .where(Access.mode >= int(AccessMode.READ))
            .where(Repository.owner_id != collaborator_id)
        )

    async def get_by_collaborator_id(
        self, collaborator_id: UserId, limit: int, order_by: str,
    ) -> list[Repository]:
        """Repositories the collaborator can read through an access grant, excluding their own.

        order_by is a comma-separated list of "<column> [ASC|DESC]" terms,
        e.g. "updated_unix DESC".
        """
        if limit <= 0:
            raise InvalidArgumentError(f"limit must be positive, got {limit}", "limit")
        clauses = parse_order_by(order_by)

        stmt = self._collaborator_join(select(Repository), collaborator_id)
        async with self._db_manager.session() as db:
            result = await db.execute(stmt.order_by(*clauses).limit(limit))
            return list(result.scalars().all())

    async def get_by_collaborator_id_with_access_mode(
        self, collaborator_id: UserId,
    ) -> dict[Repository, AccessMode]:
        """Same repositories as get_by_collaborator_id, each mapped to the collaborator's access mode."""
        stmt = self._collaborator_join(select(Repository, Access.mode), collaborator_id)
        async with self._db_manager.session() as db:
            result = await db.execute(stmt)
            return {repo: AccessMode(mode) for repo, mode in result.all()}
