"""
Core group data models.
"""

from pydantic import BaseModel, ConfigDict, Field

from .extension import ExtensionMap


class GroupData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_name: str = Field(alias="groupname")
    description: str | None = None
    external_name: str | None = Field(default=None, alias="externalName")
    extension: ExtensionMap | None = None


class GroupFields(BaseModel):
    """
    The mutable fields of a group. Which of them were actually supplied is
    tracked by pydantic (`model_fields_set`), so an omitted field and a field
    explicitly set to `None` can be told apart.
    """

    model_config = ConfigDict(populate_by_name=True)

    description: str | None = None
    external_name: str | None = Field(default=None, alias="externalName")
    extension: ExtensionMap | None = None
