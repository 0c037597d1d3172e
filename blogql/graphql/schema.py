"""
GraphQL schema definition for BlogQL.

Combines queries and mutations into a unified schema.
"""

import logging
from typing import Any, Callable, List, Optional

import strawberry
from fastapi import Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext
from strawberry.utils.logging import StrawberryLogger

from blogql.auth.context import CallerIdentity
from blogql.config.settings import Settings, get_settings
from blogql.errors import BlogQLError
from blogql.graphql.mutations import Mutation
from blogql.graphql.queries import Query

logger = logging.getLogger(__name__)


class BlogSchema(strawberry.Schema):
    """Schema that logs client errors quietly and everything else loudly."""

    def process_errors(
        self,
        errors: List[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        for error in errors:
            if isinstance(error.original_error, BlogQLError):
                logger.info(f"{error.original_error.code} at {error.path}: {error.message}")
            else:
                StrawberryLogger.error(error, execution_context)


# Create the schema
schema = BlogSchema(
    query=Query,
    mutation=Mutation,
)


def get_context(
    db=None,
    caller: Optional[CallerIdentity] = None,
    settings: Optional[Settings] = None,
    images=None,
) -> dict:
    """
    Build GraphQL context with dependencies.

    Args:
        db: MongoDB instance
        caller: Identity of the caller (anonymous if omitted)
        settings: Application settings
        images: Image store used to clean up deleted post images

    Returns:
        Context dict for resolvers
    """
    return {
        "db": db,
        "caller": caller or CallerIdentity.anonymous(),
        "settings": settings or get_settings(),
        "images": images,
    }


def get_graphql_router(
    get_db: Optional[Callable[[], Any]] = None,
    get_images: Optional[Callable[[], Any]] = None,
) -> GraphQLRouter:
    """
    Create a FastAPI-compatible GraphQL router.

    Args:
        get_db: Function returning the database for a request
        get_images: Function returning the image store

    Returns:
        GraphQLRouter to mount in FastAPI app
    """
    async def context_getter(request: Request) -> dict:
        """Build context from request."""
        return get_context(
            db=get_db() if get_db else None,
            caller=getattr(request.state, "caller", None),
            images=get_images() if get_images else None,
        )

    return GraphQLRouter(
        schema=schema,
        context_getter=context_getter,
        graphql_ide="graphiql",
    )


# Example operations for documentation
EXAMPLE_QUERIES = """
mutation Register {
  createUser(userInput: {email: "ada@example.com", name: "Ada", password: "secret"}) {
    _id
    email
  }
}

query LogIn {
  logIn(email: "ada@example.com", password: "secret") {
    token
    userId
  }
}

query Feed($page: Int) {
  getPosts(page: $page) {
    total
    posts {
      _id
      title
      imageUrl
      creator { name }
      createdAt
    }
  }
}

mutation Edit($id: ID!) {
  updatePost(id: $id, postInput: {title: "New title", content: "Rewritten content"}) {
    _id
    updatedAt
  }
}
"""
