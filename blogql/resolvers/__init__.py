"""
Resolver layer for BlogQL.

One function per API action. Each checks the caller identity, validates
input, authorizes against the stored entity, performs the store operations,
and returns serialized data.
"""

from blogql.resolvers.users import create_user, log_in, get_status, update_status
from blogql.resolvers.posts import (
    POSTS_PER_PAGE,
    create_post,
    get_posts,
    get_single_post,
    update_post,
    delete_post,
)

__all__ = [
    # Accounts
    "create_user",
    "log_in",
    "get_status",
    "update_status",
    # Posts
    "POSTS_PER_PAGE",
    "create_post",
    "get_posts",
    "get_single_post",
    "update_post",
    "delete_post",
]
