"""In-memory resource store, used for seed data and tests."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..catalog.filters import Predicate
from .base import ResourceStore

logger = logging.getLogger(__name__)


class InMemoryResourceStore(ResourceStore):
    """
    Holds documents in insertion order.

    Matching documents are returned as deep copies so callers cannot
    mutate the stored state.
    """

    def __init__(self, documents: Iterable[Mapping[str, Any]] | None = None):
        self._documents: list[dict[str, Any]] = []
        for document in documents or ():
            self.add(document)

    @property
    def backend(self) -> str:
        return "memory"

    def add(self, document: Mapping[str, Any]) -> None:
        """Append a raw document. Duplicate ids are allowed."""
        self._documents.append(copy.deepcopy(dict(document)))

    def __len__(self) -> int:
        return len(self._documents)

    async def find(self, predicate: Predicate) -> list[dict[str, Any]]:
        matches = [copy.deepcopy(doc) for doc in self._documents if predicate.matches(doc)]
        logger.debug("Memory store matched %d/%d documents", len(matches), len(self._documents))
        return matches
