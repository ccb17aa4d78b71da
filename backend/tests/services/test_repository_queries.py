"""Repository queries - lookups by id/name and through collaboration grants.

Invariants:
    - get_by_id / get_by_name raise RepoNotFoundError (is_not_found) when absent
    - Collaborator queries only return grants of at least READ and never the collaborator's own repositories
"""

import pytest

from repostore.core.domain_types import AccessMode
from repostore.core.errors import InvalidArgumentError, RepoNotFoundError, is_not_found
from repostore.schemas.repository import CreateRepoOptions


async def test_get_by_id_missing(repos):
    with pytest.raises(RepoNotFoundError) as exc_info:
        await repos.get_by_id(404)
    assert is_not_found(exc_info.value)
    assert exc_info.value.details == {"repo_id": 404}


async def test_get_by_name_missing(repos):
    await repos.create(1, CreateRepoOptions(name="demo"))
    with pytest.raises(RepoNotFoundError) as exc_info:
        await repos.get_by_name(2, "demo")
    assert exc_info.value.details == {"owner_id": 2, "name": "demo"}


async def test_get_by_id_roundtrip(repos):
    repo = await repos.create(1, CreateRepoOptions(name="demo"))
    found = await repos.get_by_id(repo.id)
    assert (found.owner_id, found.name) == (1, "demo")


@pytest.fixture
async def shared_repos(repos, grant_access):
    """Collaborator 9 holds grants on three repositories of owner 1 and owns one itself."""
    alpha = await repos.create(1, CreateRepoOptions(name="alpha"))
    beta = await repos.create(1, CreateRepoOptions(name="beta"))
    gamma = await repos.create(1, CreateRepoOptions(name="gamma"))
    hidden = await repos.create(1, CreateRepoOptions(name="hidden"))
    own = await repos.create(9, CreateRepoOptions(name="own"))

    await grant_access(9, alpha.id, AccessMode.READ)
    await grant_access(9, beta.id, AccessMode.WRITE)
    await grant_access(9, gamma.id, AccessMode.ADMIN)
    await grant_access(9, hidden.id, AccessMode.NONE)
    await grant_access(9, own.id, AccessMode.OWNER)
    return {"alpha": alpha, "beta": beta, "gamma": gamma, "hidden": hidden, "own": own}


async def test_get_by_collaborator_id_orders_and_limits(repos, shared_repos):
    result = await repos.get_by_collaborator_id(9, 2, "name DESC")
    assert [r.name for r in result] == ["gamma", "beta"]


async def test_get_by_collaborator_id_excludes_owned_and_no_access(repos, shared_repos):
    result = await repos.get_by_collaborator_id(9, 10, "id ASC")
    assert [r.name for r in result] == ["alpha", "beta", "gamma"]


async def test_get_by_collaborator_id_multi_term_order(repos, shared_repos):
    result = await repos.get_by_collaborator_id(9, 10, "updated_unix DESC, id")
    assert {r.name for r in result} == {"alpha", "beta", "gamma"}


@pytest.mark.parametrize("order_by", ["", "name; DROP TABLE repository", "unknown DESC", "name sideways"])
async def test_get_by_collaborator_id_rejects_bad_order(repos, order_by):
    with pytest.raises(InvalidArgumentError) as exc_info:
        await repos.get_by_collaborator_id(9, 10, order_by)
    assert exc_info.value.argument == "order_by"


async def test_get_by_collaborator_id_rejects_non_positive_limit(repos):
    with pytest.raises(InvalidArgumentError):
        await repos.get_by_collaborator_id(9, 0, "id")


async def test_get_by_collaborator_id_with_access_mode(repos, shared_repos):
    result = await repos.get_by_collaborator_id_with_access_mode(9)
    assert {repo.name: mode for repo, mode in result.items()} == {
        "alpha": AccessMode.READ,
        "beta": AccessMode.WRITE,
        "gamma": AccessMode.ADMIN,
    }
    assert all(isinstance(mode, AccessMode) for mode in result.values())


async def test_get_by_collaborator_id_without_grants(repos):
    assert await repos.get_by_collaborator_id(5, 10, "id") == []
    assert await repos.get_by_collaborator_id_with_access_mode(5) == {}
