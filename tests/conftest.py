"""
Shared pytest fixtures.
"""

from __future__ import annotations

import logging

import pytest

from resource_svc.service import ResourceCatalogService
from resource_svc.store import InMemoryResourceStore

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s", force=True)
logging.getLogger("resource_svc").setLevel(logging.DEBUG)


LUSTRE_FS = {
    "id": "r1",
    "name": "lustre-fs",
    "resourceType": "STORAGE",
    "resource": {"storageType": "lustre", "capacity": {"totalBytes": 1000}},
}

SLURM_CLUSTER = {
    "id": "r2",
    "name": "slurm-cluster",
    "resourceType": "COMPUTE",
    "resource": {"schedulerType": "slurm"},
}


@pytest.fixture
def documents():
    """The two-record catalog used across query tests."""
    return [dict(LUSTRE_FS), dict(SLURM_CLUSTER)]


@pytest.fixture
def store(documents):
    return InMemoryResourceStore(documents)


@pytest.fixture
def service(store):
    """Provide a strict query service over the in-memory store."""
    return ResourceCatalogService(store=store, timeout_seconds=1.0)
