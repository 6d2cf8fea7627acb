"""Error taxonomy for the resource catalog."""

from __future__ import annotations


class ResourceCatalogError(Exception):
    """Base class for all resource catalog errors."""


class SchemaViolation(ResourceCatalogError):
    """A stored document does not conform to the resource schema."""

    def __init__(self, field: str, document_id: str | None = None, detail: str | None = None):
        self.field = field
        self.document_id = document_id
        self.detail = detail
        message = f"Invalid or missing field '{field}'"
        if document_id:
            message += f" in resource '{document_id}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class TypeResolutionError(ResourceCatalogError):
    """A resource payload carries zero or more than one discriminant marker."""

    def __init__(self, markers_found: tuple[str, ...], document_id: str | None = None):
        self.markers_found = markers_found
        self.document_id = document_id
        if markers_found:
            found = ", ".join(markers_found)
            message = f"Ambiguous resource payload (markers: {found})"
        else:
            message = "Resource payload has no storageType or schedulerType marker"
        if document_id:
            message += f" in resource '{document_id}'"
        super().__init__(message)


class StoreUnavailable(ResourceCatalogError):
    """The document store could not be reached or did not answer in time."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Resource store unavailable: {reason}")
