"""
Configuration module for BlogQL.

Provides settings management loaded from the environment.
"""

from blogql.config.settings import Settings, get_settings, configure

__all__ = [
    "Settings",
    "get_settings",
    "configure",
]
