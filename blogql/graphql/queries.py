"""
GraphQL query resolvers for BlogQL.
"""

import strawberry
from strawberry.types import Info
from typing import Optional

from blogql.graphql.types import (
    AuthData,
    PostData,
    PostType,
    UserType,
    _post_to_type,
    _user_to_type,
)
from blogql.resolvers import posts, users


@strawberry.type(name="RootQueries")
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def log_in(self, info: Info, email: str, password: str) -> AuthData:
        """Exchange credentials for a token."""
        result = users.log_in(
            info.context["db"],
            email,
            password,
            settings=info.context.get("settings"),
        )
        return AuthData(token=result["token"], user_id=result["user_id"])

    @strawberry.field
    async def get_posts(self, info: Info, page: Optional[int] = None) -> PostData:
        """List posts newest first, two per page."""
        result = posts.get_posts(info.context["db"], info.context.get("caller"), page)
        return PostData(
            posts=[_post_to_type(p) for p in result["posts"]],
            total=result["total"],
        )

    @strawberry.field
    async def get_single_post(self, info: Info, id: strawberry.ID) -> PostType:
        """Get a post by ID."""
        data = posts.get_single_post(info.context["db"], info.context.get("caller"), str(id))
        return _post_to_type(data)

    @strawberry.field
    async def get_status(self, info: Info) -> UserType:
        """Get the caller's account."""
        data = users.get_status(info.context["db"], info.context.get("caller"))
        return _user_to_type(data)
