"""Query filters - turn optional query arguments into a store predicate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ResourceQuery:
    """Optional equality arguments accepted by a resource query."""
    id: str | None = None
    name: str | None = None
    resource_type: str | None = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any] | None = None) -> ResourceQuery:
        """Build from wire-named arguments (``id``, ``name``, ``resourceType``)."""
        args = args or {}
        return cls(
            id=args.get("id"),
            name=args.get("name"),
            resource_type=args.get("resourceType", args.get("resource_type")),
        )


@dataclass(frozen=True, slots=True)
class Predicate:
    """
    A conjunction of field equality constraints.

    An empty predicate matches every document.
    """
    constraints: tuple[tuple[str, str], ...] = ()

    @property
    def is_match_all(self) -> bool:
        return not self.constraints

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Check whether a raw document satisfies every constraint."""
        return all(
            field in document and document[field] == value
            for field, value in self.constraints
        )

    def to_document(self) -> dict[str, str]:
        """Render as a document-store filter. A new dict is returned per call."""
        return dict(self.constraints)


# Argument attribute -> stored field name
_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("resource_type", "resourceType"),
)


def build_filter(args: ResourceQuery | Mapping[str, Any] | None = None) -> Predicate:
    """
    Build a predicate from optional query arguments.

    Arguments that are absent or empty add no constraint; the rest are
    combined with AND. Values are not validated, so an unknown
    ``resourceType`` simply matches nothing.
    """
    if not isinstance(args, ResourceQuery):
        args = ResourceQuery.from_args(args)

    constraints = []
    for attr, stored_field in _FIELDS:
        value = getattr(args, attr)
        if value:
            constraints.append((stored_field, value))
    return Predicate(constraints=tuple(constraints))
