"""Payload variant resolution.

A stored ``resource`` payload has no explicit tag; its variant is decided by
which discriminant marker it carries. Exactly one marker must be present.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import SchemaViolation, TypeResolutionError
from .types import Compute, ResourcePayload, Storage, VariantTag

STORAGE_MARKER = "storageType"
SCHEDULER_MARKER = "schedulerType"

_VARIANTS: dict[VariantTag, type[Storage] | type[Compute]] = {
    VariantTag.STORAGE: Storage,
    VariantTag.COMPUTE: Compute,
}


def _markers(payload: Mapping[str, Any]) -> tuple[str, ...]:
    # A marker set to null counts as absent
    return tuple(
        marker for marker in (STORAGE_MARKER, SCHEDULER_MARKER)
        if payload.get(marker) is not None
    )


def classify_payload(payload: Any) -> VariantTag:
    """Return the variant tag for a raw payload without building it."""
    if not isinstance(payload, Mapping):
        return VariantTag.INVALID

    markers = _markers(payload)
    if markers == (STORAGE_MARKER,):
        return VariantTag.STORAGE
    if markers == (SCHEDULER_MARKER,):
        return VariantTag.COMPUTE
    return VariantTag.INVALID


def resolve_variant(payload: Any, document_id: str | None = None) -> ResourcePayload:
    """
    Build the typed payload variant for a raw ``resource`` sub-document.

    Raises:
        TypeResolutionError: if the payload has neither or both markers.
        SchemaViolation: if the payload is not an object, or a field inside
            the selected variant has the wrong shape.
    """
    if payload is not None and not isinstance(payload, Mapping):
        raise SchemaViolation(
            "resource", document_id, detail=f"expected object, got {type(payload).__name__}"
        )

    tag = classify_payload(payload)
    if tag is VariantTag.INVALID:
        raise TypeResolutionError(_markers(payload or {}), document_id)

    return _VARIANTS[tag].from_dict(payload)
