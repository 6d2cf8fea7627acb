"""Service configuration dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml


class ResolutionPolicy(str, Enum):
    """What a query does with a document that cannot be mapped to a resource."""
    STRICT = "strict"    # Fail the whole query
    LENIENT = "lenient"  # Log and skip the document


@dataclass
class StoreConfig:
    """Document store configuration."""
    backend: str = "memory"  # "memory" or "mongo"
    seed_file: str | None = None  # YAML/JSON documents for the memory backend

    url: str = "mongodb://localhost:27017"
    database: str = "sgci"
    collection: str = "resources"

    timeout_seconds: float = 5.0

    @classmethod
    def from_dict(cls, data: dict) -> StoreConfig:
        return cls(
            backend=str(data.get("backend", "memory")).lower(),
            seed_file=data.get("seed_file"),
            url=data.get("url", "mongodb://localhost:27017"),
            database=data.get("database", "sgci"),
            collection=data.get("collection", "resources"),
            timeout_seconds=float(data.get("timeout_seconds", 5.0)),
        )


@dataclass
class QueryConfig:
    resolution_policy: ResolutionPolicy = ResolutionPolicy.STRICT

    @classmethod
    def from_dict(cls, data: dict) -> QueryConfig:
        return cls(
            resolution_policy=ResolutionPolicy(str(data.get("resolution_policy", "strict")).lower()),
        )


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 4000

    @classmethod
    def from_dict(cls, data: dict) -> ServerConfig:
        return cls(
            host=data.get("host", "0.0.0.0"),
            port=int(data.get("port", 4000)),
        )


@dataclass
class LoggingConfig:
    level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> LoggingConfig:
        return cls(level=str(data.get("level", "INFO")).upper())


@dataclass
class Config:
    """Top-level service configuration."""
    store: StoreConfig = field(default_factory=StoreConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary, then apply environment overrides."""
        config = cls(
            store=StoreConfig.from_dict(data.get("store") or {}),
            query=QueryConfig.from_dict(data.get("query") or {}),
            server=ServerConfig.from_dict(data.get("server") or {}),
            logging=LoggingConfig.from_dict(data.get("logging") or {}),
        )
        config.apply_env()
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def apply_env(self) -> None:
        """Apply ``RESOURCE_SVC_*`` environment overrides."""
        store_url = os.environ.get("RESOURCE_SVC_STORE_URL")
        if store_url:
            self.store.url = store_url
        log_level = os.environ.get("RESOURCE_SVC_LOG_LEVEL")
        if log_level:
            self.logging.level = log_level.upper()
