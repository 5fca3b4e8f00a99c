"""
Group membership view: which users belong to a group, and whether each of
them is a cluster administrator.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdir.core.user import CallerIdentity, MembershipEntry

from . import user as user_service
from .directory import UnknownError, authorize_admin


async def list_members(
    caller: CallerIdentity,
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[MembershipEntry]:
    """
    List the users whose group list contains `group_name`. Requires admin.

    Users are scanned in the order the user store returns them (creation
    order) and that order is kept. The group does not have to exist; a name no
    user carries gives an empty list. Cost is linear in the total number of
    users.

    Parameters
    ----------
    caller: CallerIdentity
        The user performing the request.
    group_name: str
        The group to list the members of.
    conn: AsyncSession
        The database session.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    UnknownError
        If the store fails.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    members = []

    try:
        for user in await user_service.get_user_list(conn=conn):
            if not user.in_group(group_name):
                continue

            members.append(
                MembershipEntry(
                    user_name=user.user_name,
                    cluster_admin=await user_service.is_cluster_admin(
                        user_name=user.user_name, conn=conn, log=log
                    ),
                )
            )
    except (user_service.UserNotFound, SQLAlchemyError) as e:
        raise UnknownError(str(e)) from e

    await log.adebug("membership.listed", number_of_members=len(members))

    return members
