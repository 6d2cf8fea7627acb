"""Resource catalog query service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from .catalog.filters import ResourceQuery, build_filter
from .catalog.loader import parse_resource
from .catalog.types import Resource
from .config import ResolutionPolicy
from .errors import SchemaViolation, StoreUnavailable, TypeResolutionError
from .store.base import ResourceStore

logger = logging.getLogger(__name__)


class ResourceCatalogService:
    """
    Answers resource queries against a document store.

    Each query builds its own predicate, performs a single store lookup
    bounded by ``timeout_seconds``, and maps every returned document to a
    typed Resource. Nothing is shared between concurrent queries.
    """

    def __init__(
        self,
        store: ResourceStore,
        timeout_seconds: float = 5.0,
        resolution_policy: ResolutionPolicy = ResolutionPolicy.STRICT,
    ):
        self.store = store
        self.timeout_seconds = timeout_seconds
        self.resolution_policy = resolution_policy

    async def query(self, args: ResourceQuery | Mapping[str, Any] | None = None) -> list[Resource]:
        """
        Return resources matching the optional ``id``, ``name`` and
        ``resourceType`` arguments, in store order.

        Raises:
            StoreUnavailable: the store failed or did not answer in time.
            SchemaViolation, TypeResolutionError: a matching document could
                not be mapped and the policy is strict.
        """
        predicate = build_filter(args)
        logger.debug("Resource query filter: %s", predicate.to_document())

        documents = await self._find(predicate)

        resources: list[Resource] = []
        for document in documents:
            try:
                resources.append(parse_resource(document))
            except (SchemaViolation, TypeResolutionError) as e:
                if self.resolution_policy is ResolutionPolicy.STRICT:
                    logger.error("Query failed on malformed resource: %s", e)
                    raise
                logger.warning("Skipping malformed resource: %s", e)

        logger.debug("Resource query returned %d/%d documents", len(resources), len(documents))
        return resources

    async def _find(self, predicate) -> list[dict[str, Any]]:
        try:
            return await asyncio.wait_for(self.store.find(predicate), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("Store %s timed out after %.1fs", self.store.backend, self.timeout_seconds)
            raise StoreUnavailable(f"timed out after {self.timeout_seconds}s") from None
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error("Store %s lookup failed: %s", self.store.backend, e)
            raise StoreUnavailable(str(e) or type(e).__name__) from e
