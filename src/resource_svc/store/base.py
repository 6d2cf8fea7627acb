"""Base class for resource document stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..catalog.filters import Predicate


class ResourceStore(ABC):
    """
    A read-only collection of resource documents.

    Implementations return raw documents in their native order and raise
    whatever their driver raises on failure; the query service is
    responsible for translating failures into ``StoreUnavailable``.
    """

    @property
    @abstractmethod
    def backend(self) -> str:
        """Short name of the backend (e.g. "memory", "mongo")."""
        ...

    @abstractmethod
    async def find(self, predicate: Predicate) -> list[dict[str, Any]]:
        """Return every document matching the predicate."""
        ...

    async def close(self) -> None:
        """Release any connections held by the store."""
        return None
