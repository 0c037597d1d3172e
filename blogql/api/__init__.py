"""
BlogQL API Layer.

Provides:
- GraphQL endpoint for accounts and posts
- Image upload and static image serving
- Health check
"""

from blogql.api.main import create_app, app

__all__ = ["create_app", "app"]
