"""Repository name rules - the default name validator consumed by RepositoriesStore.

Invariants:
    - Names are compared trimmed and lowercased
    - Empty names, reserved names and reserved patterns raise NameNotAllowedError
    - A pattern starting with "*" matches a suffix; one ending with "*" matches a prefix
"""

from repostore.core.errors import NameNotAllowedError

RESERVED_REPO_NAMES = frozenset({".", "..", "-"})
RESERVED_REPO_PATTERNS = ("*.git", "*.wiki")


def is_name_allowed(
    names: frozenset[str], patterns: tuple[str, ...], name: str,
) -> None:
    """Raise NameNotAllowedError if name is empty, reserved, or matches a reserved pattern."""
    name = name.strip().lower()
    if not name or name in names:
        raise NameNotAllowedError({"reason": "reserved", "name": name})

    for pattern in patterns:
        if (
            (pattern.startswith("*") and name.endswith(pattern[1:]))
            or (pattern.endswith("*") and name.startswith(pattern[:-1]))
        ):
            raise NameNotAllowedError({"reason": "reserved", "pattern": pattern})


def is_repo_name_allowed(name: str) -> None:
    is_name_allowed(RESERVED_REPO_NAMES, RESERVED_REPO_PATTERNS, name)
