"""
Meta functionality for the database.
"""

from .group import Group
from .user import User

ALL_TABLES = (
    Group,
    User,
)
