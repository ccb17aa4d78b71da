"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - RepoId and UserId wrap ints; 0 or negative never names a stored row
    - AccessMode values are ordered: comparisons answer "at least this level"

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - IntEnum for AccessMode: persisted as its integer value and compared with <=
"""

from enum import IntEnum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RepoId = NewType("RepoId", int)
UserId = NewType("UserId", int)


# ─── Enums ───────────────────────────────────────────────────────

class AccessMode(IntEnum):
    """Permission level a user holds on a repository."""
    NONE = 0
    READ = 1
    WRITE = 2
    ADMIN = 3
    OWNER = 4

    def __str__(self) -> str:
        return self.name.lower()
