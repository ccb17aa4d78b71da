"""Composition root - services share one explicitly passed session manager."""

from repostore.bootstrap import build_services
from repostore.config import Settings
from repostore.schemas.repository import CreateRepoOptions


async def test_build_services_wires_one_manager(tmp_path):
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'boot.db'}")
    services = build_services(settings, configure_logging=False)
    try:
        assert services.repos._db_manager is services.db
        assert services.perms._db_manager is services.db
        assert services.repos._access is services.perms

        await services.db.create_all()
        repo = await services.repos.create(1, CreateRepoOptions(name="boot"))
        assert (await services.repos.get_by_id(repo.id)).name == "boot"
    finally:
        await services.dispose()
