"""
Service layer for groups. This is the group store: it knows how to read and
write group records, but performs no authorization.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdir.core.extension import ExtensionMap
from groupdir.core.group import GroupData
from groupdir.database.group import Group


class GroupNotFound(Exception):
    pass


class GroupExistsError(Exception):
    pass


async def create(
    group_name: str,
    description: str | None,
    external_name: str | None,
    extension: ExtensionMap | None,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Create a new group.

    Parameters
    ----------
    group_name: str
        The new group. Used as-is; group names are identities and are not
        normalized.
    description: str | None
        Free text description.
    external_name: str | None
        The name of this group in an external identity provider.
    extension: ExtensionMap | None
        Free-form attributes. Normalized to an empty map if not given.

    Raises
    ------
    GroupExistsError
        If a group with this name already exists.
    """
    log = log.bind(group_name=group_name, external_name=external_name)

    group = Group(
        group_name=group_name,
        description=description,
        external_name=external_name,
        extension=extension if extension is not None else {},
    )

    try:
        conn.add(group)
        await conn.flush()
    except IntegrityError:
        await log.ainfo("group.exists")
        raise GroupExistsError(f"Group {group_name} already exists")

    await log.ainfo("group.created")

    return group


async def get_group_list(
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[Group]:
    """
    Get a list of all groups, in creation order.

    Parameters
    ----------
    conn: AsyncSession
        The database session.
    log: FilteringBoundLogger
        Logger instance.
    """
    result = await conn.execute(select(Group).order_by(Group.group_id))
    groups = list(result.scalars().all())
    await log.adebug("group.listed", number_of_groups=len(groups))
    return groups


async def read_by_name(
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Read a group by its name.

    Parameters
    ----------
    group_name: str
        The name of the group to read.
    conn: AsyncSession
        The database session.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_name=group_name)
    result = await conn.execute(select(Group).where(Group.group_name == group_name))
    group = result.scalar_one_or_none()
    if not group:
        await log.ainfo("group.not_found")
        raise GroupNotFound(f"Group {group_name} is not found.")
    await log.adebug("group.found")
    return group


async def read_by_names(
    group_names: list[str],
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[Group]:
    """
    Read every existing group whose name is in `group_names`. Names that do not
    correspond to a group are skipped.
    """
    if not group_names:
        return []

    result = await conn.execute(
        select(Group).where(Group.group_name.in_(group_names)).order_by(Group.group_id)
    )
    groups = list(result.scalars().all())
    await log.adebug(
        "group.read_many", requested=len(group_names), number_of_groups=len(groups)
    )
    return groups


async def update(
    group_name: str,
    data: GroupData,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Write the mutable fields of `data` to the stored group `group_name`. The
    group name itself never changes.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_name=group_name)
    group = await read_by_name(group_name=group_name, conn=conn, log=log)

    group.description = data.description
    group.external_name = data.external_name
    group.extension = data.extension

    conn.add(group)
    await conn.flush()
    await log.ainfo("group.updated")

    return group


async def delete_group(
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> None:
    """
    Delete a group by its name.

    Parameters
    ----------
    group_name: str
        The name of the group to delete.
    conn: AsyncSession
        The database session.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_name=group_name)
    result = await conn.execute(delete(Group).where(Group.group_name == group_name))

    if result.rowcount == 0:
        await log.ainfo("group.not_found")
        raise GroupNotFound(f"Group {group_name} is not found.")

    await log.ainfo("group.deleted")
