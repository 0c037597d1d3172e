"""
GraphQL type definitions for BlogQL.

All GraphQL types are defined using Strawberry's decorator-based approach.
Wire names follow the public contract (``Post``, ``User``, ``_id``, ...).
"""

import strawberry
from strawberry.types import Info
from typing import Optional, List

from blogql.resolvers.serializers import serialize_post


# === Entity Types ===

@strawberry.type(name="User")
class UserType:
    """An account. The password is never returned."""
    id: strawberry.ID = strawberry.field(name="_id")
    name: str
    email: str
    status: str
    post_ids: strawberry.Private[List[str]]
    password: Optional[str] = None

    @strawberry.field
    async def posts(self, info: Info) -> List["PostType"]:
        """Posts created by this user, oldest first."""
        db = info.context.get("db")
        if db is None or not self.post_ids:
            return []
        docs = db.find_posts_by_ids(self.post_ids)
        return [_post_to_type(serialize_post(d), creator=self) for d in docs]


@strawberry.type(name="Post")
class PostType:
    """A blog post."""
    id: strawberry.ID = strawberry.field(name="_id")
    title: str
    content: str
    image_url: str
    creator: UserType
    created_at: str
    updated_at: str


# === Result Types ===

@strawberry.type(name="AuthData")
class AuthData:
    """Result of a successful log in."""
    token: str
    user_id: str


@strawberry.type(name="PostData")
class PostData:
    """One page of posts plus the total number of posts."""
    posts: List[PostType]
    total: int


# === Input Types ===

@strawberry.input(name="UserInputData")
class UserInputData:
    """Input for registering an account."""
    email: str
    name: str
    password: str


@strawberry.input(name="PostInputData")
class PostInputData:
    """Input for creating or updating a post. Omit ``imageUrl`` to keep the current image."""
    title: str
    content: str
    image_url: Optional[str] = None


# === Converters ===

def _user_to_type(data: dict) -> UserType:
    """Convert serialized user to GraphQL type."""
    return UserType(
        id=strawberry.ID(data["id"]),
        name=data.get("name", ""),
        email=data.get("email", ""),
        status=data.get("status", ""),
        post_ids=list(data.get("posts", [])),
    )


def _post_to_type(data: dict, creator: Optional[UserType] = None) -> PostType:
    """Convert serialized post to GraphQL type."""
    if creator is None and data.get("creator"):
        creator = _user_to_type(data["creator"])

    return PostType(
        id=strawberry.ID(data["id"]),
        title=data.get("title", ""),
        content=data.get("content", ""),
        image_url=data.get("image_url", ""),
        creator=creator,
        created_at=data.get("created_at", ""),
        updated_at=data.get("updated_at", ""),
    )
