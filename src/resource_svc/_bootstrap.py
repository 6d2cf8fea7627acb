"""Shared initialisation helpers.

Each function constructs exactly one component from the service stack.
Both the HTTP app and the command-line client call these so the two entry
points stay in sync.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import Config
from .service import ResourceCatalogService
from .store import InMemoryResourceStore, MongoResourceStore, ResourceStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def load_config(config_path: str | None = None):
    """Load config from file or fall back to defaults.

    Returns ``(config, resolved_config_path)`` where *resolved_config_path*
    is the string that was actually used (needed to resolve relative paths
    such as ``store.seed_file``).
    """
    config_path = config_path or os.environ.get("RESOURCE_SVC_CONFIG", "config.yaml")
    if Path(config_path).exists():
        config = Config.from_yaml(config_path)
        logger.info("Loaded config from %s", config_path)
    else:
        config = Config.from_dict({})
        logger.info("Using default config (no file at %s)", config_path)
    return config, config_path


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

def build_store(config: Config, config_path: str) -> ResourceStore:
    """Build the configured document store.

    The memory backend is seeded from ``store.seed_file`` when set, resolved
    relative to the config file's directory.
    """
    from .catalog.loader import load_documents

    store_config = config.store

    if store_config.backend == "mongo":
        logger.info(
            "Using Mongo store %s.%s", store_config.database, store_config.collection
        )
        return MongoResourceStore(
            url=store_config.url,
            database=store_config.database,
            collection=store_config.collection,
            timeout_seconds=store_config.timeout_seconds,
        )

    if store_config.backend != "memory":
        raise ValueError(f"Unknown store backend: {store_config.backend}")

    store = InMemoryResourceStore()
    if store_config.seed_file:
        config_dir = Path(config_path).parent.resolve()
        seed_path = (config_dir / store_config.seed_file).resolve()
        logger.info("Seeding memory store from: %s", seed_path)
        for document in load_documents(seed_path):
            store.add(document)
    logger.info("Memory store ready with %d documents", len(store))
    return store


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

def build_service(config: Config, store: ResourceStore) -> ResourceCatalogService:
    """Construct and return the ResourceCatalogService."""
    return ResourceCatalogService(
        store=store,
        timeout_seconds=config.store.timeout_seconds,
        resolution_policy=config.query.resolution_policy,
    )
