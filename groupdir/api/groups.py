"""
Group management.
"""

from fastapi import APIRouter, status

from groupdir.api.dependencies import (
    CallerDependency,
    DatabaseDependency,
    LoggerDependency,
    SettingsDependency,
)
from groupdir.core.group import GroupData
from groupdir.core.models import (
    DescriptionUpdateRequest,
    ExtensionAttributeUpdateRequest,
    ExtensionUpdateRequest,
    ExternalNameUpdateRequest,
    GroupCreationRequest,
    GroupUpdateRequest,
    MessageResponse,
)
from groupdir.core.user import MembershipEntry
from groupdir.service import directory
from groupdir.service import membership as membership_service

group_app = APIRouter(tags=["Group Management"])


@group_app.get(
    "",
    summary="List all groups",
    description="Retrieve every group record, in creation order.",
    responses={
        200: {"description": "List of groups."},
    },
)
async def list_groups(
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[GroupData]:
    groups = await directory.get_all_groups(conn=conn, log=log)
    await log.adebug("api.group.list_all", number_of_groups=len(groups))
    return groups


@group_app.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a new group",
    description=(
        "Create a new group. The extension defaults to an empty map. "
        "Requires admin privileges."
    ),
    responses={
        201: {"description": "Group created successfully."},
        403: {"description": "Access denied to create groups."},
        409: {"description": "A group with this name already exists."},
    },
)
async def create_group(
    content: GroupCreationRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await directory.create_group(
        caller=caller,
        group_name=content.group_name,
        description=content.description,
        external_name=content.external_name,
        extension=content.extension,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="group is created successfully")


@group_app.put(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Update a group",
    description=(
        "Update a group. With `patch` set, only the supplied fields change and a "
        "supplied extension is merged key-by-key at the top level; otherwise "
        "description, externalName and extension are all replaced, and omitted "
        "ones are cleared. Requires admin privileges."
    ),
    responses={
        201: {"description": "Group updated successfully."},
        400: {"description": "Group not found."},
        403: {"description": "Access denied to update groups."},
    },
)
async def update_group(
    content: GroupUpdateRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    group_name = content.data.group_name

    await directory.update_group(
        caller=caller,
        group_name=group_name,
        mode=content.to_mode(),
        conn=conn,
        log=log,
    )

    return MessageResponse(message=f"update group {group_name} successfully.")


@group_app.get(
    "/{group_name}",
    summary="Get group by name",
    responses={
        200: {"description": "Group details."},
        400: {"description": "Group not found."},
    },
)
async def get_group(
    group_name: str,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    return await directory.get_group(group_name=group_name, conn=conn, log=log)


@group_app.delete(
    "/{group_name}",
    summary="Delete a group",
    description="Delete a group by its name. Requires admin privileges.",
    responses={
        200: {"description": "Group deleted successfully."},
        400: {"description": "Group not found."},
        403: {"description": "Access denied to delete groups."},
    },
)
async def delete_group(
    group_name: str,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await directory.delete_group(
        caller=caller, group_name=group_name, conn=conn, log=log
    )

    return MessageResponse(message="group is removed successfully")


@group_app.get(
    "/{group_name}/userlist",
    summary="List group members",
    description=(
        "List the users in a group, each annotated with whether they are a "
        "cluster administrator. Requires admin privileges."
    ),
    responses={
        200: {"description": "Members of the group."},
        403: {"description": "Access denied to list members."},
    },
)
async def list_group_members(
    group_name: str,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[MembershipEntry]:
    return await membership_service.list_members(
        caller=caller, group_name=group_name, conn=conn, log=log
    )


@group_app.put(
    "/{group_name}/extension",
    status_code=status.HTTP_201_CREATED,
    summary="Merge into a group's extension",
    description=(
        "Replace the given top-level extension keys. Deprecated, use a patch "
        "update instead."
    ),
    deprecated=True,
)
async def update_group_extension(
    group_name: str,
    content: ExtensionUpdateRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await directory.update_group_extension(
        caller=caller,
        group_name=group_name,
        extension=content.extension,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="update group extension data successfully.")


@group_app.put(
    "/{group_name}/extension/{path:path}",
    status_code=status.HTTP_201_CREATED,
    summary="Set a nested extension attribute",
    description=(
        "Set the extension attribute addressed by a slash-separated path. "
        "Deprecated, use a patch update instead."
    ),
    responses={
        400: {"description": "Group not found, or the path has an empty segment."},
    },
    deprecated=True,
)
async def update_group_extension_attr(
    group_name: str,
    path: str,
    content: ExtensionAttributeUpdateRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
    settings: SettingsDependency,
) -> MessageResponse:
    await directory.update_group_extension_attr(
        caller=caller,
        group_name=group_name,
        path=path,
        value=content.data,
        conn=conn,
        log=log,
        delimiter=settings.extension_path_delimiter,
    )

    return MessageResponse(message="Update group extension data successfully.")


@group_app.put(
    "/{group_name}/description",
    status_code=status.HTTP_201_CREATED,
    summary="Set a group's description",
    description="Deprecated, use a patch update instead.",
    deprecated=True,
)
async def update_group_description(
    group_name: str,
    content: DescriptionUpdateRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await directory.update_group_description(
        caller=caller,
        group_name=group_name,
        description=content.description,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="update group description data successfully.")


@group_app.put(
    "/{group_name}/externalname",
    status_code=status.HTTP_201_CREATED,
    summary="Set a group's external name",
    description="Deprecated, use a patch update instead.",
    deprecated=True,
)
async def update_group_external_name(
    group_name: str,
    content: ExternalNameUpdateRequest,
    caller: CallerDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await directory.update_group_external_name(
        caller=caller,
        group_name=group_name,
        external_name=content.external_name,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="update group externalName data successfully.")
