"""Catalog system - resource types, variant resolution, and query filters."""

from .types import (
    BatchSystem,
    Capacity,
    CommandPath,
    Compute,
    ComputeQuota,
    Connection,
    ExecutionCommand,
    FileSystem,
    ForkSystem,
    Host,
    NodeHardware,
    Partition,
    Quota,
    Resource,
    ResourceCategory,
    Storage,
    VariantTag,
)
from .resolver import classify_payload, resolve_variant
from .filters import Predicate, ResourceQuery, build_filter
from .loader import ResourceLoader, load_documents, parse_resource

__all__ = [
    "BatchSystem",
    "Capacity",
    "CommandPath",
    "Compute",
    "ComputeQuota",
    "Connection",
    "ExecutionCommand",
    "FileSystem",
    "ForkSystem",
    "Host",
    "NodeHardware",
    "Partition",
    "Quota",
    "Resource",
    "ResourceCategory",
    "Storage",
    "VariantTag",
    "classify_payload",
    "resolve_variant",
    "Predicate",
    "ResourceQuery",
    "build_filter",
    "ResourceLoader",
    "load_documents",
    "parse_resource",
]
