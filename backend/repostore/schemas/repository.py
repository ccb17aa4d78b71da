"""Repository option schemas - inputs of RepositoriesStore.create and .watch.

Invariants:
    - fork_id is 0 unless fork is set
    - WatchRepositoryOptions carries the repository owner and visibility so the
      access gate runs without re-reading the repository
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CreateRepoOptions(BaseModel):
    """Options for creating a repository record."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    default_branch: str = ""
    private: bool = False
    mirror: bool = False
    enable_wiki: bool = False
    enable_issues: bool = False
    enable_pulls: bool = False
    fork: bool = False
    fork_id: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_fork_linkage(self) -> "CreateRepoOptions":
        if self.fork_id and not self.fork:
            raise ValueError("fork_id requires fork=True")
        return self


class WatchRepositoryOptions(BaseModel):
    """Who watches which repository, plus the repository facts the access gate needs."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    repo_id: int
    repo_owner_id: int
    repo_is_private: bool = False
