"""
Dependencies used by the API.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from groupdir.config.settings import Settings
from groupdir.core.user import CallerIdentity

TRUTHY = {"true", "1", "yes"}


@lru_cache
def SETTINGS():
    return Settings()


DATABASE_MANAGER = SETTINGS().async_manager()


async def get_async_session():
    async with DATABASE_MANAGER.session() as session:
        async with session.begin():
            yield session


def logger():
    return get_logger()


SettingsDependency = Annotated[Settings, Depends(SETTINGS)]
DatabaseDependency = Annotated[AsyncSession, Depends(get_async_session)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]


async def handle_caller(
    request: Request, settings: SettingsDependency
) -> CallerIdentity:
    """
    Resolve the caller from the headers set by the authenticating proxy in
    front of this service. Raises a 401 if no user is given.
    """
    user_name = request.headers.get(settings.user_header)

    if not user_name:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Log in first"
        )

    is_admin = request.headers.get(settings.admin_header, "").strip().lower()

    return CallerIdentity(user_name=user_name, is_admin=is_admin in TRUTHY)


CallerDependency = Annotated[CallerIdentity, Depends(handle_caller)]
