"""
Pydantic models for request/responses to APIs, and the update modes used by
the directory.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from .extension import ExtensionMap
from .group import GroupFields


class FullReplace(BaseModel):
    """
    Overwrite every mutable field; fields that were not supplied become `None`.
    """

    mode: Literal["replace"] = "replace"
    data: GroupFields


class Patch(BaseModel):
    """
    Touch only the supplied fields. A supplied extension is merged key-by-key
    at the top level into the existing one.
    """

    mode: Literal["patch"] = "patch"
    data: GroupFields


UpdateMode = Annotated[FullReplace | Patch, Field(discriminator="mode")]


class GroupCreationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_name: str = Field(alias="groupname")
    description: str | None = None
    external_name: str | None = Field(default=None, alias="externalName")
    extension: ExtensionMap | None = None


class GroupUpdateData(GroupFields):
    group_name: str = Field(alias="groupname")


class GroupUpdateRequest(BaseModel):
    data: GroupUpdateData
    patch: bool = False

    def to_mode(self) -> UpdateMode:
        # Carry over only the fields the client sent, so that `Patch` can
        # tell an omitted field from one explicitly set to null.
        supplied = {
            name: getattr(self.data, name)
            for name in self.data.model_fields_set
            if name in GroupFields.model_fields
        }
        fields = GroupFields(**supplied)

        if self.patch:
            return Patch(data=fields)

        return FullReplace(data=fields)


class ExtensionUpdateRequest(BaseModel):
    extension: ExtensionMap


class ExtensionAttributeUpdateRequest(BaseModel):
    data: JsonValue


class DescriptionUpdateRequest(BaseModel):
    description: str | None


class ExternalNameUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    external_name: str | None = Field(alias="externalName")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
