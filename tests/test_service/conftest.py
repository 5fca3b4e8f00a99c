"""
Configuration variables and fixtures for the service layer tests.
"""

from uuid import uuid4

import pytest
import pytest_asyncio

from groupdir.service import groups as groups_service


@pytest.fixture
def group_name():
    return f"test_group_{uuid4().hex[:8]}"


@pytest_asyncio.fixture(loop_scope="session")
async def group(session_manager, logger, group_name):
    """
    A group with a nested extension, removed again after the test if the test
    did not delete it itself.
    """
    async with session_manager.session() as conn:
        async with conn.begin():
            await groups_service.create(
                group_name=group_name,
                description="A test group",
                external_name="ext_test_group",
                extension={"a": {"x": 1}, "b": 2},
                conn=conn,
                log=logger,
            )

    yield group_name

    try:
        async with session_manager.session() as conn:
            async with conn.begin():
                await groups_service.delete_group(
                    group_name=group_name, conn=conn, log=logger
                )
    except groups_service.GroupNotFound:
        pass
