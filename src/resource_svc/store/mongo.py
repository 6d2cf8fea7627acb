"""MongoDB-backed resource store."""

from __future__ import annotations

import logging
from typing import Any

from ..catalog.filters import Predicate
from ..errors import StoreUnavailable
from .base import ResourceStore

logger = logging.getLogger(__name__)


class MongoResourceStore(ResourceStore):
    """
    Reads resource documents from a MongoDB collection.

    The driver (``pymongo``) is imported on first use so the service can run
    with the memory backend without it installed.
    """

    def __init__(
        self,
        url: str,
        database: str,
        collection: str,
        timeout_seconds: float = 5.0,
    ):
        self.url = url
        self.database = database
        self.collection = collection
        self.timeout_seconds = timeout_seconds
        self._client = None

    @property
    def backend(self) -> str:
        return "mongo"

    def _get_collection(self):
        if self._client is None:
            try:
                from pymongo import AsyncMongoClient
            except ImportError as e:
                raise StoreUnavailable(
                    "pymongo not installed. Run: pip install resource-catalog-svc[mongo]"
                ) from e

            timeout_ms = int(self.timeout_seconds * 1000)
            self._client = AsyncMongoClient(
                self.url,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
            )
            logger.info("Connected Mongo client for %s.%s", self.database, self.collection)
        return self._client[self.database][self.collection]

    async def find(self, predicate: Predicate) -> list[dict[str, Any]]:
        collection = self._get_collection()
        # Mongo's own ObjectId is not part of the resource shape
        cursor = collection.find(predicate.to_document(), projection={"_id": False})
        return await cursor.to_list(length=None)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
