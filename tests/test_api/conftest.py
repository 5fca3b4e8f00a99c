"""
Fixtures for the API tests. Requests go straight to the ASGI app, with the
database session dependency pointed at the test database.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def client(session_manager):
    from groupdir.api.app import app
    from groupdir.api.dependencies import get_async_session

    async def get_test_session():
        async with session_manager.session() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_async_session] = get_test_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
