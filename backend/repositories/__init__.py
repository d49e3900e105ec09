"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .query_builder import FilterBuilder, ResourceFilter
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "FilterBuilder",
    "ResourceFilter",
    "UserRepository",
]
