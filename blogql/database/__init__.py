"""
Database module for BlogQL.

Provides MongoDB integration for persistent storage of users and posts.
"""

from blogql.database.mongodb import MongoDB, get_database, initialize_database
from blogql.database.schemas import (
    USER_SCHEMA,
    POST_SCHEMA,
    DEFAULT_USER_STATUS,
)

__all__ = [
    "MongoDB",
    "get_database",
    "initialize_database",
    "USER_SCHEMA",
    "POST_SCHEMA",
    "DEFAULT_USER_STATUS",
]
