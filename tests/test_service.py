"""Tests for the resource catalog query service."""

from __future__ import annotations

import asyncio

import pytest

from resource_svc.catalog.filters import ResourceQuery
from resource_svc.catalog.types import Compute, Storage
from resource_svc.config import ResolutionPolicy
from resource_svc.errors import SchemaViolation, StoreUnavailable, TypeResolutionError
from resource_svc.service import ResourceCatalogService
from resource_svc.store import InMemoryResourceStore
from resource_svc.store.base import ResourceStore


class FailingStore(ResourceStore):
    backend = "failing"

    def __init__(self, exc: Exception):
        self.exc = exc

    async def find(self, predicate):
        raise self.exc


class SlowStore(ResourceStore):
    backend = "slow"

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    async def find(self, predicate):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


@pytest.mark.asyncio
async def test_query_by_resource_type(service: ResourceCatalogService) -> None:
    resources = await service.query({"resourceType": "STORAGE"})

    assert [r.id for r in resources] == ["r1"]
    assert isinstance(resources[0].resource, Storage)
    assert resources[0].resource.capacity.total_bytes == 1000


@pytest.mark.asyncio
async def test_query_all_resolves_each_variant(service: ResourceCatalogService) -> None:
    resources = await service.query({})

    assert [r.id for r in resources] == ["r1", "r2"]
    assert isinstance(resources[0].resource, Storage)
    assert isinstance(resources[1].resource, Compute)
    assert resources[1].resource.scheduler_type == "slurm"


@pytest.mark.asyncio
async def test_query_without_arguments(service: ResourceCatalogService) -> None:
    assert len(await service.query()) == 2


@pytest.mark.asyncio
async def test_query_unknown_id_is_empty(service: ResourceCatalogService) -> None:
    assert await service.query({"id": "r3"}) == []


@pytest.mark.asyncio
async def test_query_conjunction(service: ResourceCatalogService) -> None:
    assert await service.query(ResourceQuery(name="lustre-fs", resource_type="COMPUTE")) == []
    matched = await service.query(ResourceQuery(name="slurm-cluster", resource_type="COMPUTE"))
    assert [r.id for r in matched] == ["r2"]


@pytest.mark.asyncio
async def test_duplicate_ids_are_all_returned(store: InMemoryResourceStore, service) -> None:
    store.add({"id": "r1", "name": "lustre-fs-2", "resourceType": "STORAGE",
               "resource": {"storageType": "gpfs"}})

    resources = await service.query({"id": "r1"})
    assert [r.name for r in resources] == ["lustre-fs", "lustre-fs-2"]


@pytest.mark.asyncio
async def test_strict_policy_fails_whole_query(store: InMemoryResourceStore, service) -> None:
    store.add({"id": "bad", "resourceType": "STORAGE",
               "resource": {"storageType": "x", "schedulerType": "y"}})

    with pytest.raises(TypeResolutionError):
        await service.query({})


@pytest.mark.asyncio
async def test_lenient_policy_skips_malformed(store: InMemoryResourceStore) -> None:
    store.add({"id": "ambiguous", "resourceType": "STORAGE",
               "resource": {"storageType": "x", "schedulerType": "y"}})
    store.add({"name": "no-id", "resourceType": "STORAGE", "resource": {"storageType": "x"}})
    service = ResourceCatalogService(store=store, resolution_policy=ResolutionPolicy.LENIENT)

    resources = await service.query({})
    assert [r.id for r in resources] == ["r1", "r2"]


@pytest.mark.asyncio
async def test_strict_policy_schema_violation(store: InMemoryResourceStore, service) -> None:
    store.add({"id": "no-type", "resource": {"storageType": "x"}})

    with pytest.raises(SchemaViolation):
        await service.query({})
    # A filter that excludes the bad record still succeeds
    assert len(await service.query({"resourceType": "STORAGE"})) == 1


@pytest.mark.asyncio
async def test_store_error_becomes_store_unavailable() -> None:
    service = ResourceCatalogService(store=FailingStore(ConnectionError("refused")))

    with pytest.raises(StoreUnavailable) as exc_info:
        await service.query({})
    assert "refused" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_store_unavailable_passes_through() -> None:
    original = StoreUnavailable("driver missing")
    service = ResourceCatalogService(store=FailingStore(original))

    with pytest.raises(StoreUnavailable) as exc_info:
        await service.query({})
    assert exc_info.value is original


@pytest.mark.asyncio
async def test_store_timeout() -> None:
    store = SlowStore(delay=5.0)
    service = ResourceCatalogService(store=store, timeout_seconds=0.05)

    with pytest.raises(StoreUnavailable, match="timed out"):
        await service.query({})
    assert store.cancelled


@pytest.mark.asyncio
async def test_cancelling_query_cancels_store_lookup() -> None:
    store = SlowStore(delay=5.0)
    service = ResourceCatalogService(store=store, timeout_seconds=10.0)

    task = asyncio.create_task(service.query({}))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert store.cancelled


@pytest.mark.asyncio
async def test_concurrent_queries_are_isolated(service: ResourceCatalogService) -> None:
    storage, compute, everything = await asyncio.gather(
        service.query({"resourceType": "STORAGE"}),
        service.query({"resourceType": "COMPUTE"}),
        service.query({}),
    )

    assert [r.id for r in storage] == ["r1"]
    assert [r.id for r in compute] == ["r2"]
    assert [r.id for r in everything] == ["r1", "r2"]
