"""Resource document stores."""

from .base import ResourceStore
from .memory import InMemoryResourceStore
from .mongo import MongoResourceStore

__all__ = [
    "ResourceStore",
    "InMemoryResourceStore",
    "MongoResourceStore",
]
