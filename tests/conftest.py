"""
Core configuration
"""

import pytest
import pytest_asyncio
import structlog

from groupdir.config.settings import Settings
from groupdir.core.user import CallerIdentity


@pytest.fixture(scope="session")
def server_settings(tmp_path_factory):
    yield Settings(
        database_type="sqlite",
        database_db=str(tmp_path_factory.mktemp("database") / "groupdir.db"),
        database_echo=False,
    )


@pytest.fixture(scope="session")
def database(server_settings: Settings):
    from groupdir.database.meta import ALL_TABLES

    # Ensure ruff doesn't get rid of import
    ALL_TABLES[1]

    server_settings.sync_manager().create_all()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def session_manager(server_settings: Settings, database):
    manager = server_settings.async_manager()
    yield manager
    await manager.engine.dispose()


@pytest.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest.fixture
def admin():
    return CallerIdentity(user_name="admin", is_admin=True)


@pytest.fixture
def not_admin():
    return CallerIdentity(user_name="regular_user", is_admin=False)
