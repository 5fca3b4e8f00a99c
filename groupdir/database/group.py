"""
Group ORM
"""

from copy import deepcopy

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from groupdir.core.group import GroupData
from groupdir.core.uuid import UUID, uuid7


class Group(SQLModel, table=True):
    group_id: UUID = Field(primary_key=True, default_factory=uuid7)

    group_name: str = Field(unique=True, index=True)
    description: str | None = None
    external_name: str | None = None

    # Free-form attribute bag. JSON columns do not track in-place mutation,
    # so always assign a new object when changing it.
    extension: dict | None = Field(default=None, sa_column=Column(JSON))

    def is_admin_group(self) -> bool:
        """
        Check whether membership of this group grants cluster administration,
        i.e. whether `extension.acls.admin` is set.
        """
        if not isinstance(self.extension, dict):
            return False

        acls = self.extension.get("acls")

        if not isinstance(acls, dict):
            return False

        return acls.get("admin") is True

    def to_core(self) -> GroupData:
        """
        Convert this Group ORM object to a GroupData core object. The extension
        is copied, so the core object can be modified freely.
        """
        return GroupData(
            group_name=self.group_name,
            description=self.description,
            external_name=self.external_name,
            extension=deepcopy(self.extension),
        )
