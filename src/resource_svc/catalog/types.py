"""Resource types - hosts, connections, storage and compute payloads.

Types are declared leaf-first: shared sub-entities, then the two payload
variants, then the top-level ``Resource``. Each type knows how to build itself
from a loosely-typed stored document (``from_dict``) and how to render the
camelCase wire shape (``to_dict``). Absent values are omitted on output.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeVar

from ..errors import SchemaViolation

T = TypeVar("T")


class ResourceCategory(str, Enum):
    """Known values of the top-level ``resourceType`` field."""
    STORAGE = "STORAGE"
    COMPUTE = "COMPUTE"


class VariantTag(str, Enum):
    """Closed set of outcomes when classifying a ``resource`` payload."""
    STORAGE = "storage"
    COMPUTE = "compute"
    INVALID = "invalid"


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else str(value)


def _int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise SchemaViolation(key, detail=f"expected integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SchemaViolation(key, detail=f"expected integer, got {value!r}") from None


def _mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise SchemaViolation(key, detail=f"expected object, got {type(value).__name__}")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise SchemaViolation(key, detail=f"expected list, got {type(value).__name__}")
    return list(value)


def parse_objects(
    data: Mapping[str, Any],
    key: str,
    factory: Callable[[Mapping[str, Any]], T],
) -> tuple[T, ...] | None:
    """Build each object in the list under ``key``; None if the key is absent."""
    items = _list(data, key)
    if items is None:
        return None
    parsed = []
    for item in items:
        if not isinstance(item, Mapping):
            raise SchemaViolation(key, detail=f"expected list of objects, got {type(item).__name__}")
        parsed.append(factory(item))
    return tuple(parsed)


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop absent keys from a rendered object."""
    return {k: v for k, v in values.items() if v is not None}


def _render(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, tuple):
        return [_render(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


# ---------------------------------------------------------------------------
# Shared sub-entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Host:
    """A login or service endpoint for a resource."""
    hostname: str | None = None
    ip: str | None = None
    priority: int | None = None  # Lower is preferred

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Host:
        return cls(
            hostname=_str(data, "hostname"),
            ip=_str(data, "ip"),
            priority=_int(data, "priority"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "hostname": self.hostname,
            "ip": self.ip,
            "priority": self.priority,
        })


@dataclass(frozen=True, slots=True)
class Connection:
    """How to reach a resource (e.g. SSH over port 22, optionally via a proxy)."""
    connection_protocol: str | None = None
    security_protocol: str | None = None
    port: int | None = None
    proxy_host: str | None = None
    proxy_port: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Connection:
        return cls(
            connection_protocol=_str(data, "connectionProtocol"),
            security_protocol=_str(data, "securityProtocol"),
            port=_int(data, "port"),
            proxy_host=_str(data, "proxyHost"),
            proxy_port=_int(data, "proxyPort"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "connectionProtocol": self.connection_protocol,
            "securityProtocol": self.security_protocol,
            "port": self.port,
            "proxyHost": self.proxy_host,
            "proxyPort": self.proxy_port,
        })


@dataclass(frozen=True, slots=True)
class FileSystem:
    """Well-known directories exposed by a storage system."""
    root_dir: str | None = None
    home_dir: str | None = None
    scratch_dir: str | None = None
    work_dir: str | None = None
    archive_dir: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileSystem:
        return cls(
            root_dir=_str(data, "rootDir"),
            home_dir=_str(data, "homeDir"),
            scratch_dir=_str(data, "scratchDir"),
            work_dir=_str(data, "workDir"),
            archive_dir=_str(data, "archiveDir"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "rootDir": self.root_dir,
            "homeDir": self.home_dir,
            "scratchDir": self.scratch_dir,
            "workDir": self.work_dir,
            "archiveDir": self.archive_dir,
        })


@dataclass(frozen=True, slots=True)
class Capacity:
    total_bytes: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Capacity:
        return cls(total_bytes=_int(data, "totalBytes"))

    def to_dict(self) -> dict[str, Any]:
        return _compact({"totalBytes": self.total_bytes})


@dataclass(frozen=True, slots=True)
class Quota:
    bytes_per_user: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Quota:
        return cls(bytes_per_user=_int(data, "bytesPerUser"))

    def to_dict(self) -> dict[str, Any]:
        return _compact({"bytesPerUser": self.bytes_per_user})


@dataclass(frozen=True, slots=True)
class NodeHardware:
    """Per-node hardware description of a partition or fork system."""
    cpu_type: str | None = None
    cpu_count: int | None = None
    gpu_type: str | None = None
    gpu_count: int | None = None
    memory_type: str | None = None
    memory_size: str | None = None  # Free-form, e.g. "256GB"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NodeHardware:
        return cls(
            cpu_type=_str(data, "cpuType"),
            cpu_count=_int(data, "cpuCount"),
            gpu_type=_str(data, "gpuType"),
            gpu_count=_int(data, "gpuCount"),
            memory_type=_str(data, "memoryType"),
            memory_size=_str(data, "memorySize"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "cpuType": self.cpu_type,
            "cpuCount": self.cpu_count,
            "gpuType": self.gpu_type,
            "gpuCount": self.gpu_count,
            "memoryType": self.memory_type,
            "memorySize": self.memory_size,
        })


@dataclass(frozen=True, slots=True)
class ComputeQuota:
    """Scheduler limits applied to a partition."""
    max_jobs_total: int | None = None
    max_jobs_per_user: int | None = None
    max_nodes_per_job: int | None = None
    max_time_per_job: int | None = None
    max_memory_per_job: str | None = None
    max_cpus_per_job: int | None = None
    max_gpus_per_job: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ComputeQuota:
        return cls(
            max_jobs_total=_int(data, "maxJobsTotal"),
            max_jobs_per_user=_int(data, "maxJobsPerUser"),
            max_nodes_per_job=_int(data, "maxNodesPerJob"),
            max_time_per_job=_int(data, "maxTimePerJob"),
            max_memory_per_job=_str(data, "maxMemoryPerJob"),
            max_cpus_per_job=_int(data, "maxCPUsPerJob"),
            max_gpus_per_job=_int(data, "maxGPUsPerJob"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "maxJobsTotal": self.max_jobs_total,
            "maxJobsPerUser": self.max_jobs_per_user,
            "maxNodesPerJob": self.max_nodes_per_job,
            "maxTimePerJob": self.max_time_per_job,
            "maxMemoryPerJob": self.max_memory_per_job,
            "maxCPUsPerJob": self.max_cpus_per_job,
            "maxGPUsPerJob": self.max_gpus_per_job,
        })


@dataclass(frozen=True, slots=True)
class CommandPath:
    name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CommandPath:
        return cls(name=_str(data, "name"))

    def to_dict(self) -> dict[str, Any]:
        return _compact({"name": self.name})


@dataclass(frozen=True, slots=True)
class Partition:
    """A scheduler queue/partition with its node shape and limits."""
    name: str | None = None
    total_nodes: int | None = None
    node_hardware: NodeHardware | None = None
    compute_quotas: ComputeQuota | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Partition:
        hardware = _mapping(data, "nodeHardware")
        quotas = _mapping(data, "computeQuotas")
        return cls(
            name=_str(data, "name"),
            total_nodes=_int(data, "totalNodes"),
            node_hardware=NodeHardware.from_dict(hardware) if hardware is not None else None,
            compute_quotas=ComputeQuota.from_dict(quotas) if quotas is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "name": self.name,
            "totalNodes": self.total_nodes,
            "nodeHardware": _render(self.node_hardware),
            "computeQuotas": _render(self.compute_quotas),
        })


@dataclass(frozen=True, slots=True)
class ExecutionCommand:
    """A command used to launch work, with the modules it needs loaded."""
    command_type: str | None = None
    command_prefix: str | None = None
    module_dependencies: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExecutionCommand:
        modules = _list(data, "moduleDependencies")
        return cls(
            command_type=_str(data, "commandType"),
            command_prefix=_str(data, "commandPrefix"),
            module_dependencies=tuple(str(m) for m in modules) if modules is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "commandType": self.command_type,
            "commandPrefix": self.command_prefix,
            "moduleDependencies": _render(self.module_dependencies),
        })


@dataclass(frozen=True, slots=True)
class BatchSystem:
    job_manager: str | None = None
    command_paths: tuple[CommandPath, ...] | None = None
    partitions: tuple[Partition, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BatchSystem:
        paths = _list(data, "commandPaths")
        command_paths = None
        if paths is not None:
            # Bare strings are accepted as the path name
            command_paths = tuple(
                CommandPath(name=str(p)) if not isinstance(p, Mapping) else CommandPath.from_dict(p)
                for p in paths
            )
        return cls(
            job_manager=_str(data, "jobManager"),
            command_paths=command_paths,
            partitions=parse_objects(data, "partitions", Partition.from_dict),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "jobManager": self.job_manager,
            "commandPaths": _render(self.command_paths),
            "partitions": _render(self.partitions),
        })


@dataclass(frozen=True, slots=True)
class ForkSystem:
    """Direct (non-scheduled) execution on a host."""
    system_type: str | None = None
    version: str | None = None
    node_hardware: NodeHardware | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ForkSystem:
        hardware = _mapping(data, "nodeHardware")
        return cls(
            system_type=_str(data, "systemType"),
            version=_str(data, "version"),
            node_hardware=NodeHardware.from_dict(hardware) if hardware is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "systemType": self.system_type,
            "version": self.version,
            "nodeHardware": _render(self.node_hardware),
        })


# ---------------------------------------------------------------------------
# Payload variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Storage:
    """Storage payload, marked by the presence of ``storageType``."""
    variant: ClassVar[VariantTag] = VariantTag.STORAGE

    storage_type: str
    connection: Connection | None = None
    file_systems: tuple[FileSystem, ...] | None = None
    capacity: Capacity | None = None
    quota: Quota | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Storage:
        connection = _mapping(data, "connection")
        capacity = _mapping(data, "capacity")
        quota = _mapping(data, "quota")
        return cls(
            storage_type=str(data["storageType"]),
            connection=Connection.from_dict(connection) if connection is not None else None,
            file_systems=parse_objects(data, "fileSystems", FileSystem.from_dict),
            capacity=Capacity.from_dict(capacity) if capacity is not None else None,
            quota=Quota.from_dict(quota) if quota is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "storageType": self.storage_type,
            "connection": _render(self.connection),
            "fileSystems": _render(self.file_systems),
            "capacity": _render(self.capacity),
            "quota": _render(self.quota),
        })


@dataclass(frozen=True, slots=True)
class Compute:
    """Compute payload, marked by the presence of ``schedulerType``."""
    variant: ClassVar[VariantTag] = VariantTag.COMPUTE

    scheduler_type: str
    connection: Connection | None = None
    execution_commands: tuple[ExecutionCommand, ...] | None = None
    batch_system: BatchSystem | None = None
    fork_system: ForkSystem | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Compute:
        connection = _mapping(data, "connection")
        batch = _mapping(data, "batchSystem")
        fork = _mapping(data, "forkSystem")
        return cls(
            scheduler_type=str(data["schedulerType"]),
            connection=Connection.from_dict(connection) if connection is not None else None,
            execution_commands=parse_objects(data, "executionCommands", ExecutionCommand.from_dict),
            batch_system=BatchSystem.from_dict(batch) if batch is not None else None,
            fork_system=ForkSystem.from_dict(fork) if fork is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "schedulerType": self.scheduler_type,
            "connection": _render(self.connection),
            "executionCommands": _render(self.execution_commands),
            "batchSystem": _render(self.batch_system),
            "forkSystem": _render(self.fork_system),
        })


ResourcePayload = Storage | Compute


# ---------------------------------------------------------------------------
# Top-level resource
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Resource:
    """
    A catalogued infrastructure resource.

    ``resource_type`` is kept as the stored string: unknown categories are
    carried through untouched. ``resource`` is exactly one payload variant.
    """
    id: str
    resource_type: str
    resource: ResourcePayload
    name: str | None = None
    description: str | None = None
    hosts: tuple[Host, ...] = field(default_factory=tuple)
    connections: tuple[Connection, ...] = field(default_factory=tuple)

    @property
    def variant(self) -> VariantTag:
        return self.resource.variant

    @property
    def category(self) -> ResourceCategory | None:
        """The known category for ``resource_type``, if any."""
        try:
            return ResourceCategory(self.resource_type)
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "resourceType": self.resource_type,
            "resource": self.resource.to_dict(),
            "hosts": _render(self.hosts),
            "connections": _render(self.connections),
        })
