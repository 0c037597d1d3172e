"""
GraphQL mutation resolvers for BlogQL.
"""

import strawberry
from strawberry.types import Info

from blogql.graphql.types import (
    PostInputData,
    PostType,
    UserInputData,
    UserType,
    _post_to_type,
    _user_to_type,
)
from blogql.resolvers import posts, users


@strawberry.type(name="RootMutations")
class Mutation:
    """Root GraphQL mutation type."""

    # === Accounts ===

    @strawberry.mutation
    async def create_user(self, info: Info, user_input: UserInputData) -> UserType:
        """Register a new account."""
        data = users.create_user(
            info.context["db"],
            email=user_input.email,
            name=user_input.name,
            password=user_input.password,
            settings=info.context.get("settings"),
        )
        return _user_to_type(data)

    @strawberry.mutation
    async def update_status(self, info: Info, status: str) -> UserType:
        """Overwrite the caller's status line."""
        data = users.update_status(info.context["db"], info.context.get("caller"), status)
        return _user_to_type(data)

    # === Posts ===

    @strawberry.mutation
    async def create_post(self, info: Info, post_input: PostInputData) -> PostType:
        """Create a post owned by the caller."""
        data = posts.create_post(
            info.context["db"],
            info.context.get("caller"),
            title=post_input.title,
            content=post_input.content,
            image_url=post_input.image_url,
        )
        return _post_to_type(data)

    @strawberry.mutation
    async def update_post(
        self,
        info: Info,
        id: strawberry.ID,
        post_input: PostInputData,
    ) -> PostType:
        """Update a post owned by the caller."""
        data = posts.update_post(
            info.context["db"],
            info.context.get("caller"),
            str(id),
            title=post_input.title,
            content=post_input.content,
            image_url=post_input.image_url,
        )
        return _post_to_type(data)

    @strawberry.mutation
    async def delete_post(self, info: Info, id: strawberry.ID) -> bool:
        """Delete a post owned by the caller."""
        return posts.delete_post(
            info.context["db"],
            info.context.get("caller"),
            str(id),
            images=info.context.get("images"),
        )
