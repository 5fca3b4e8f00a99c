"""
UUID creation. Records are keyed by uuid7 so that primary key order is
creation order; uuid7 is not part of the python standard library as of 3.12.
"""

from uuid import UUID as UUID

from uuid_extensions import uuid7 as uuid7

__all__ = ["UUID", "uuid7"]
