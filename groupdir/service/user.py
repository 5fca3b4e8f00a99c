"""
Service layer for users. Users are read-only from the point of view of the
group directory; creation and deletion exist for setup and tests.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdir.database.user import User

from . import groups as groups_service


class UserNotFound(Exception):
    pass


class UserExistsError(Exception):
    pass


async def create(
    user_name: str,
    group_list: list[str],
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User:
    """
    Creates a user, if they do not exist.
    """
    log = log.bind(user_name=user_name, group_list=group_list)

    user = User(user_name=user_name, group_list=list(group_list))

    try:
        conn.add(user)
        await conn.flush()
    except IntegrityError:
        await log.ainfo("user.create.exists")
        raise UserExistsError(f"User with user name {user_name} already exists")

    log = log.bind(user_id=user.user_id)
    await log.ainfo("user.created")

    return user


async def read_by_name(user_name: str, conn: AsyncSession) -> User:
    query = select(User).filter(User.user_name == user_name)
    res = (await conn.execute(query)).scalar_one_or_none()

    if res is None:
        raise UserNotFound(f"User with name {user_name} not found in the database")

    return res


async def get_user_list(conn: AsyncSession) -> list[User]:
    """
    Get a list of all users registered to the system, in creation order.
    """
    query = select(User).order_by(User.user_id)
    return list((await conn.execute(query)).scalars().all())


async def is_cluster_admin(
    user_name: str, conn: AsyncSession, log: FilteringBoundLogger
) -> bool:
    """
    Whether `user_name` administers the cluster: true when any existing group
    the user belongs to has `extension.acls.admin` set.

    Raises
    ------
    UserNotFound
        If the user does not exist.
    """
    log = log.bind(user_name=user_name)
    user = await read_by_name(user_name=user_name, conn=conn)

    groups = await groups_service.read_by_names(
        group_names=list(user.group_list or []), conn=conn, log=log
    )
    cluster_admin = any(group.is_admin_group() for group in groups)

    await log.adebug("user.cluster_admin_checked", cluster_admin=cluster_admin)

    return cluster_admin


async def delete(user_name: str, conn: AsyncSession, log: FilteringBoundLogger):
    """
    Deletes the user. Groups they belong to are unaffected.
    """
    user = await read_by_name(user_name=user_name, conn=conn)

    log = log.bind(user_id=user.user_id, user_name=user_name)

    await conn.delete(user)
    await conn.flush()

    await log.ainfo("user.deleted")

    return
