from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any, Dict, Iterable, List, Optional, Protocol

from models.resource import Entity
from services.hal import HALBuilder
from services.jsongraph import JSONGraphBuilder
from services.links import LinkResolver
from utils.errors import UnsupportedConvention

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Conventions
# -----------------------------------------------------------------------------
class Convention(str, PyEnum):
    """Hypermedia conventions a document can be rendered in"""
    HAL = "hal"                 # link-annotation style
    JSON_GRAPH = "json-graph"   # resource/relationship-graph style

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self]

    @classmethod
    def parse(cls, value: str) -> Convention:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise UnsupportedConvention(value, [c.value for c in cls]) from None


MEDIA_TYPES: Dict[Convention, str] = {
    Convention.HAL: "application/hal+json",
    Convention.JSON_GRAPH: "application/vnd.api+json",
}
CONVENTIONS_BY_MEDIA_TYPE: Dict[str, Convention] = {v: k for k, v in MEDIA_TYPES.items()}

# Media ranges that accept whatever the server prefers
GENERIC_MEDIA_TYPES = ("*/*", "application/*", "application/json")


def negotiate(accept: Optional[str], default: Convention = Convention.HAL) -> Convention:
    """
    Pick a convention from an Accept header. Entries are ranked by quality
    (header order breaks ties); q=0 entries are refused outright.
    """
    if not accept or not accept.strip():
        return default

    candidates = []
    for index, part in enumerate(accept.split(",")):
        media_type, _, params = part.partition(";")
        media_type = media_type.strip().lower()
        if not media_type:
            continue

        quality = 1.0
        for param in params.split(";"):
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value.strip())
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue
        candidates.append((-quality, index, media_type))

    for _, _, media_type in sorted(candidates):
        if media_type in CONVENTIONS_BY_MEDIA_TYPE:
            return CONVENTIONS_BY_MEDIA_TYPE[media_type]
        if media_type in GENERIC_MEDIA_TYPES:
            return default

    raise UnsupportedConvention(accept, MEDIA_TYPES.values())


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------
class DocumentBuilder(Protocol):
    def build(self, entity: Entity, depth: int = 1) -> Dict[str, Any]:
        ...

    def build_collection(
        self,
        entities: Iterable[Entity],
        self_href: str,
        rel: str,
        depth: int = 1,
    ) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class RenderedDocument:
    body: bytes
    media_type: str


def serialize(document: Dict[str, Any]) -> bytes:
    """Compact, deterministic encoding; key order follows document construction."""
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class BuilderRegistry:
    """Dispatches a convention to the builder registered for it."""

    def __init__(self, builders: Optional[Dict[Convention, DocumentBuilder]] = None):
        self._builders: Dict[Convention, DocumentBuilder] = dict(builders or {})

    def register(self, convention: Convention, builder: DocumentBuilder) -> None:
        self._builders[convention] = builder

    @property
    def conventions(self) -> List[Convention]:
        return list(self._builders)

    def get(self, convention: Convention) -> DocumentBuilder:
        builder = self._builders.get(convention)
        if builder is None:
            raise UnsupportedConvention(
                getattr(convention, "value", str(convention)),
                [c.media_type for c in self._builders],
            )
        return builder

    def render(self, entity: Entity, convention: Convention, depth: int = 1) -> RenderedDocument:
        document = self.get(convention).build(entity, depth=depth)
        logger.debug("Rendered %s/%s as %s", entity.type, entity.id, convention.value)
        return RenderedDocument(body=serialize(document), media_type=convention.media_type)

    def render_collection(
        self,
        entities: Iterable[Entity],
        convention: Convention,
        self_href: str,
        rel: str,
        depth: int = 1,
    ) -> RenderedDocument:
        document = self.get(convention).build_collection(
            entities, self_href=self_href, rel=rel, depth=depth
        )
        logger.debug("Rendered collection %s as %s", self_href, convention.value)
        return RenderedDocument(body=serialize(document), media_type=convention.media_type)


def default_registry(resolver: LinkResolver) -> BuilderRegistry:
    return BuilderRegistry({
        Convention.HAL: HALBuilder(resolver),
        Convention.JSON_GRAPH: JSONGraphBuilder(resolver),
    })
