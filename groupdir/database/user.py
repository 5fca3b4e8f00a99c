"""
ORM for user information.
"""

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from groupdir.core.uuid import UUID, uuid7


class User(SQLModel, table=True):
    user_id: UUID = Field(primary_key=True, default_factory=uuid7)

    user_name: str = Field(unique=True, index=True)

    # Names of the groups this user belongs to. Groups are referenced by name
    # only; a name here does not guarantee the group exists.
    group_list: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    def in_group(self, group_name: str) -> bool:
        return group_name in (self.group_list or [])
