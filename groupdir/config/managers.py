"""
Database session management.
"""

from sqlalchemy import URL, Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, create_engine


class SyncSessionManager:
    """
    A manager for synchronous sessions, used for setup and scripts. Expected
    usage of this class to interact:

    manager = SyncSessionManager(conn_url)

    with manager.session() as conn:
        group = conn.get(Group, group_id)
    """

    connection_url: str | URL
    engine: Engine
    session: sessionmaker

    def __init__(self, connection_url: str | URL, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_engine(self.connection_url, echo=echo)
        self.session = sessionmaker(self.engine)

    def create_all(self):
        """
        Create the group and user tables if they are missing. Existing tables
        are not altered.
        """
        with self.engine.begin() as conn:
            SQLModel.metadata.create_all(conn)


class AsyncSessionManager:
    """
    A manager for asynchronous sessions. Expected usage of this class to interact:

    manager = AsyncSessionManager(conn_url)

    async with manager.session() as conn:
        async with conn.begin():
            group = await groups_service.read_by_name("admingroup", conn, log)
    """

    connection_url: str | URL
    engine: AsyncEngine
    session: async_sessionmaker

    def __init__(self, connection_url: str | URL, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_async_engine(self.connection_url, echo=echo)
        # Records are converted to core objects after the transaction ends,
        # so they must not be expired on commit.
        self.session = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_all(self):
        """
        Create any missing tables; used at startup when `create_tables` is set.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
