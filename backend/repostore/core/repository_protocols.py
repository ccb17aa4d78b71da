"""Boundary Protocols - contracts for the collaborators RepositoriesStore consumes.

Invariants:
    - NameValidator raises NameNotAllowedError on rejection and returns None otherwise
    - AccessOracle answers from the owner/visibility it is given; it never re-fetches them
    - Implementations provided by the composition root via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, plain functions satisfy NameValidator
"""

from dataclasses import dataclass
from typing import Protocol

from repostore.core.domain_types import AccessMode, RepoId, UserId


@dataclass(frozen=True)
class AccessModeOptions:
    """Repository facts the oracle needs, supplied by the caller."""
    owner_id: UserId
    private: bool


class NameValidator(Protocol):
    """Contract for repository name validation."""
    def __call__(self, name: str) -> None: ...


class AccessOracle(Protocol):
    """Contract for permission checks - implemented by PermissionsStore."""
    async def authorize(
        self,
        user_id: UserId,
        repo_id: RepoId,
        desired: AccessMode,
        opts: AccessModeOptions,
    ) -> bool: ...
