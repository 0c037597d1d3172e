"""
GraphQL API module for BlogQL.

Provides:
- Type definitions for users and posts
- Query resolvers
- Mutation resolvers
"""

from blogql.graphql.schema import schema, get_context, get_graphql_router

__all__ = [
    "schema",
    "get_context",
    "get_graphql_router",
]
