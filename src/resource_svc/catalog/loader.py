"""Resource loader - maps stored documents to resources and reads seed files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from ..errors import SchemaViolation
from .resolver import resolve_variant
from .types import Connection, Host, Resource, parse_objects

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "resourceType")

# Top-level key of the resource data repository files
WRAPPER_KEY = "sgciResources"


def parse_resource(document: Mapping[str, Any]) -> Resource:
    """
    Map a raw stored document to a typed Resource.

    Raises:
        SchemaViolation: if ``id`` or ``resourceType`` is missing, or a field
            has the wrong shape.
        TypeResolutionError: if the ``resource`` payload has no single marker.
    """
    if not isinstance(document, Mapping):
        raise SchemaViolation("<document>", detail=f"expected object, got {type(document).__name__}")

    document_id = document.get("id")
    document_id = None if document_id is None else str(document_id)
    for required in REQUIRED_FIELDS:
        if document.get(required) in (None, ""):
            raise SchemaViolation(required, document_id)

    try:
        payload = resolve_variant(document.get("resource"), document_id)
        hosts = parse_objects(document, "hosts", Host.from_dict) or ()
        connections = parse_objects(document, "connections", Connection.from_dict) or ()
    except SchemaViolation as e:
        if e.document_id is not None:
            raise
        raise SchemaViolation(e.field, document_id, e.detail) from e

    resource = Resource(
        id=document_id,
        resource_type=str(document["resourceType"]),
        resource=payload,
        name=None if document.get("name") is None else str(document["name"]),
        description=None if document.get("description") is None else str(document["description"]),
        hosts=hosts,
        connections=connections,
    )

    category = resource.category
    if category is not None and category.value.lower() != payload.variant.value:
        logger.warning(
            "Resource %s is categorised %s but carries a %s payload",
            document_id, category.value, payload.variant.value,
        )
    return resource


class ResourceLoader:
    """
    Loads raw resource documents from YAML or JSON files.

    A file holds a single resource document, a list of them, or a wrapper
    object whose ``sgciResources`` key holds the list (the layout of the
    resource data repository):
    ```yaml
    - id: r1
      name: lustre-fs
      resourceType: STORAGE
      resource:
        storageType: lustre
        capacity:
          totalBytes: 1000
    ```

    or in JSON:
    ```json
    {"sgciResources": [{"id": "r1", "resourceType": "STORAGE", ...}]}
    ```
    """

    def load_file(self, path: str | Path) -> list[dict[str, Any]]:
        """Load documents from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Resource file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        documents = self.load_list(data)
        logger.debug(f"Loaded {len(documents)} resource documents from {path}")
        return documents

    def load_list(self, data: Any) -> list[dict[str, Any]]:
        """Normalise a single document, a list, or an ``sgciResources`` wrapper."""
        if data is None:
            return []
        if isinstance(data, Mapping) and WRAPPER_KEY in data:
            data = data[WRAPPER_KEY]
            if data is None:
                return []
        if isinstance(data, Mapping):
            data = [data]
        if not isinstance(data, list):
            raise ValueError(f"Expected a resource document or list, got {type(data).__name__}")

        documents = []
        for item in data:
            if not isinstance(item, Mapping):
                raise ValueError(f"Expected a resource document, got {type(item).__name__}")
            documents.append(dict(item))
        return documents

    def load_directory(self, directory: str | Path) -> list[dict[str, Any]]:
        """
        Load documents from all YAML/JSON files in a directory.

        Files are read in alphabetical order and their documents concatenated.
        """
        directory = Path(directory)

        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix in (".yaml", ".yml", ".json")
        )

        documents: list[dict[str, Any]] = []
        for file_path in files:
            logger.info(f"Loading resource file: {file_path}")
            documents.extend(self.load_file(file_path))
        return documents


def load_documents(source: str | Path | Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Convenience function to load raw resource documents.

    Args:
        source: File path, directory path, or an iterable of documents

    Returns:
        List of documents in file order
    """
    loader = ResourceLoader()

    if not isinstance(source, (str, Path)):
        return loader.load_list(list(source))

    path = Path(source)
    if path.is_dir():
        documents = loader.load_directory(path)
    else:
        documents = loader.load_file(path)
    logger.info(f"Loaded {len(documents)} resource documents")
    return documents
