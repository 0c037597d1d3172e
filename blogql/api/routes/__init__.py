"""
BlogQL REST routes.
"""

from blogql.api.routes.images import router as images_router

__all__ = ["images_router"]
