"""
The group directory: authorization-gated operations on group records.

Every operation that mutates state is restricted to administrators, and the
check happens before anything is read from or written to the store. Updates
are read-modify-write against the store with no locking, so two concurrent
updates of the same group resolve as last-write-wins.

The single-field `update_group_*` operations are kept for older clients. Each
of them is expressed as a `Patch` restricted to its one field and runs through
the same `apply_update` as `update_group`, so their results are identical to
the equivalent unified patch.
"""

from collections.abc import Callable
from copy import deepcopy

from pydantic import JsonValue
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdir.core.extension import (
    ExtensionMap,
    assign_by_path,
    merge_top_level,
    parse_path,
)
from groupdir.core.group import GroupData, GroupFields
from groupdir.core.models import FullReplace, Patch, UpdateMode
from groupdir.core.user import CallerIdentity

from . import groups as groups_service


class ForbiddenUserError(Exception):
    pass


class NoGroupError(Exception):
    pass


class UnknownError(Exception):
    pass


async def authorize_admin(caller: CallerIdentity, log: FilteringBoundLogger) -> None:
    """
    Guard for admin-only operations.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    """
    if not caller.is_admin:
        await log.awarning("directory.access_denied")
        raise ForbiddenUserError("Non-admin is not allowed to do this operation.")


def apply_update(group: GroupData, mode: UpdateMode) -> GroupData:
    """
    Compute the result of applying `mode` to `group`. The input is not
    modified.

    - `FullReplace` overwrites description, external name and extension with
      the supplied values; anything not supplied becomes `None`.
    - `Patch` overwrites only the supplied description and external name. A
      supplied, non-empty extension is merged key-by-key at the top level, so a
      supplied key replaces everything below it and other keys are kept.
    """
    updated = group.model_copy(deep=True)

    match mode:
        case FullReplace(data=data):
            updated.description = data.description
            updated.external_name = data.external_name
            updated.extension = deepcopy(data.extension)
        case Patch(data=data):
            supplied = data.model_fields_set

            if "description" in supplied:
                updated.description = data.description

            if "external_name" in supplied:
                updated.external_name = data.external_name

            if "extension" in supplied and data.extension:
                updated.extension = merge_top_level(
                    updated.extension or {}, deepcopy(data.extension)
                )
        case _:
            raise TypeError(f"Unknown update mode {mode!r}")

    return updated


async def get_group(
    group_name: str, conn: AsyncSession, log: FilteringBoundLogger
) -> GroupData:
    """
    Read a single group. No privileges required.

    Raises
    ------
    NoGroupError
        If the group does not exist.
    UnknownError
        If the store fails.
    """
    log = log.bind(group_name=group_name)

    try:
        group = await groups_service.read_by_name(
            group_name=group_name, conn=conn, log=log
        )
    except groups_service.GroupNotFound as e:
        raise NoGroupError(f"Group {group_name} is not found.") from e
    except SQLAlchemyError as e:
        raise UnknownError(str(e)) from e

    return group.to_core()


async def get_all_groups(
    conn: AsyncSession, log: FilteringBoundLogger
) -> list[GroupData]:
    """
    Read every group, in creation order. No privileges required.
    """
    try:
        groups = await groups_service.get_group_list(conn=conn, log=log)
    except SQLAlchemyError as e:
        raise UnknownError(str(e)) from e

    return [group.to_core() for group in groups]


async def create_group(
    caller: CallerIdentity,
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
    description: str | None = None,
    external_name: str | None = None,
    extension: ExtensionMap | None = None,
) -> GroupData:
    """
    Create a new group. Requires admin.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    groups_service.GroupExistsError
        If a group with this name already exists.
    UnknownError
        If the store fails.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    try:
        group = await groups_service.create(
            group_name=group_name,
            description=description,
            external_name=external_name,
            extension=deepcopy(extension),
            conn=conn,
            log=log,
        )
    except SQLAlchemyError as e:
        raise UnknownError(str(e)) from e

    return group.to_core()


async def _update(
    group_name: str,
    build_mode: Callable[[GroupData], UpdateMode],
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Load the group, apply the mode produced by `build_mode` for the current
    record, and write the result back. Authorization must already have
    happened.
    """
    try:
        current = (
            await groups_service.read_by_name(group_name=group_name, conn=conn, log=log)
        ).to_core()

        mode = build_mode(current)
        log = log.bind(mode=mode.mode)
        updated = apply_update(current, mode)

        await groups_service.update(
            group_name=group_name, data=updated, conn=conn, log=log
        )
    except groups_service.GroupNotFound as e:
        raise NoGroupError(f"Group {group_name} is not found.") from e
    except SQLAlchemyError as e:
        raise UnknownError(str(e)) from e

    await log.ainfo("directory.group_updated")

    return updated


async def update_group(
    caller: CallerIdentity,
    group_name: str,
    mode: UpdateMode,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Update a group, either replacing all mutable fields or patching the
    supplied ones. Requires admin.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    NoGroupError
        If the group does not exist.
    UnknownError
        If the store fails.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    return await _update(
        group_name=group_name, build_mode=lambda _: mode, conn=conn, log=log
    )


async def delete_group(
    caller: CallerIdentity,
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> None:
    """
    Delete a group. Requires admin.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    NoGroupError
        If the group does not exist (including when it was already deleted).
    UnknownError
        If the store fails.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    try:
        await groups_service.delete_group(group_name=group_name, conn=conn, log=log)
    except groups_service.GroupNotFound as e:
        raise NoGroupError(f"Group {group_name} is not found.") from e
    except SQLAlchemyError as e:
        raise UnknownError(str(e)) from e


async def update_group_extension_attr(
    caller: CallerIdentity,
    group_name: str,
    path: str,
    value: JsonValue,
    conn: AsyncSession,
    log: FilteringBoundLogger,
    delimiter: str = "/",
) -> GroupData:
    """
    Set a single, possibly nested, extension attribute. `path` is a delimited
    string such as `acls/admin`; missing or non-mapping intermediate values
    are replaced by mappings. Requires admin.

    Raises
    ------
    ForbiddenUserError
        If the caller is not an administrator.
    InvalidExtensionPath
        If the path has an empty segment.
    NoGroupError
        If the group does not exist.
    UnknownError
        If the store fails.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name, path=path)

    await authorize_admin(caller=caller, log=log)

    segments = parse_path(path, delimiter=delimiter)

    def build_mode(current: GroupData) -> Patch:
        extension = assign_by_path(deepcopy(current.extension or {}), segments, value)
        top = segments[0]
        return Patch(data=GroupFields(extension={top: extension[top]}))

    return await _update(
        group_name=group_name, build_mode=build_mode, conn=conn, log=log
    )


async def update_group_extension(
    caller: CallerIdentity,
    group_name: str,
    extension: ExtensionMap,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Merge the top-level keys of `extension` into the group's extension.
    Requires admin.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    mode = Patch(data=GroupFields(extension=extension))

    return await _update(
        group_name=group_name, build_mode=lambda _: mode, conn=conn, log=log
    )


async def update_group_description(
    caller: CallerIdentity,
    group_name: str,
    description: str | None,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Overwrite the group's description. Requires admin.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    mode = Patch(data=GroupFields(description=description))

    return await _update(
        group_name=group_name, build_mode=lambda _: mode, conn=conn, log=log
    )


async def update_group_external_name(
    caller: CallerIdentity,
    group_name: str,
    external_name: str | None,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Overwrite the group's external name. Requires admin.
    """
    log = log.bind(caller=caller.user_name, group_name=group_name)

    await authorize_admin(caller=caller, log=log)

    mode = Patch(data=GroupFields(external_name=external_name))

    return await _update(
        group_name=group_name, build_mode=lambda _: mode, conn=conn, log=log
    )
