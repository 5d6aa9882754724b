from __future__ import annotations

from typing import Iterable


class HypermediaError(Exception):
    """Base class for failures raised while building hypermedia documents."""
    pass


class UnresolvedRelation(HypermediaError):
    """No link template exists for an (entity type, relation) pair.

    This is a configuration defect of the routing table, never a per-request
    condition, so it is surfaced as a server-side error.
    """

    def __init__(self, entity_type: str, rel: str):
        self.entity_type = entity_type
        self.rel = rel
        super().__init__(f"No link template for relation '{rel}' of entity type '{entity_type}'")


class MalformedGraph(HypermediaError):
    """The entity graph handed to a builder violates the resource model."""
    pass


class UnsupportedConvention(HypermediaError):
    """The requested hypermedia convention has no registered builder."""

    def __init__(self, requested: str, supported: Iterable[str] = ()):
        self.requested = requested
        self.supported = list(supported)
        message = f"Unsupported hypermedia convention: {requested!r}"
        if self.supported:
            message += f" (supported: {', '.join(self.supported)})"
        super().__init__(message)


class RelationNotFound(HypermediaError):
    """A relation requested while following links is absent from a document."""

    def __init__(self, rel: str, url: str | None = None):
        self.rel = rel
        self.url = url
        where = f" in document at {url}" if url else ""
        super().__init__(f"Relation '{rel}' not found{where}")
