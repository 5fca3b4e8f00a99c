"""
Shared user objects that are serialized.
"""

from pydantic import BaseModel, ConfigDict, Field


class CallerIdentity(BaseModel):
    """
    The already-authenticated caller of an operation. Resolved upstream of
    this service; only `is_admin` is used for authorization.
    """

    user_name: str
    is_admin: bool = False


class MembershipEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field(alias="username")
    cluster_admin: bool = Field(alias="clusterAdmin")
