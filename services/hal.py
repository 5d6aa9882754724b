from __future__ import annotations

from typing import Any, Dict, Iterable, List

from models.hateoas import HALLink
from models.resource import Entity, Representations, SELF_REL
from services.links import LinkResolver
from utils.errors import MalformedGraph

LINKS_KEY = "_links"
EMBEDDED_KEY = "_embedded"
RESERVED_KEYS = (LINKS_KEY, EMBEDDED_KEY)


class HALBuilder:
    """
    Serializes an entity graph into the HAL convention: attributes as
    top-level fields, a "_links" section with one entry per relation plus
    "self", and an "_embedded" section for relations flagged for embedding.

    `depth` bounds embedding: embedded documents are built with depth - 1,
    so with the default of 1 they carry links but never their own
    "_embedded" section. Every occurrence of one (type, id) within a
    document must carry the same attributes.
    """

    def __init__(self, resolver: LinkResolver):
        self.resolver = resolver

    def build(self, entity: Entity, depth: int = 1) -> Dict[str, Any]:
        return self._build(entity, depth, Representations())

    def _build(self, entity: Entity, depth: int, seen: Representations) -> Dict[str, Any]:
        entity.check_relations()
        seen.register(entity)

        document: Dict[str, Any] = {}
        for field, value in entity.attributes.items():
            if field in RESERVED_KEYS:
                raise MalformedGraph(
                    f"{entity.type}/{entity.id}: attribute '{field}' collides with a reserved HAL key"
                )
            document[field] = value

        document[LINKS_KEY] = self._links(entity)

        if depth > 0:
            embedded = self._embedded(entity, depth, seen)
            if embedded:
                document[EMBEDDED_KEY] = embedded

        return document

    def build_collection(
        self,
        entities: Iterable[Entity],
        self_href: str,
        rel: str,
        depth: int = 1,
    ) -> Dict[str, Any]:
        """Build a collection document embedding each entity under `rel`."""
        seen = Representations()
        documents = [self._build(entity, depth, seen) for entity in entities]
        return {
            "count": len(documents),
            LINKS_KEY: {SELF_REL: self._link(self_href)},
            EMBEDDED_KEY: {rel: documents},
        }

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------
    def _links(self, entity: Entity) -> Dict[str, Dict[str, str]]:
        links = {SELF_REL: self._link(self.resolver.resolve(entity.type, entity.id, SELF_REL))}
        # To-many relations link the collection endpoint, not each target
        for relation in entity.relations:
            links[relation.name] = self._link(
                self.resolver.resolve(entity.type, entity.id, relation.name)
            )
        return links

    def _embedded(self, entity: Entity, depth: int, seen: Representations) -> Dict[str, Any]:
        embedded: Dict[str, Any] = {}
        for relation in entity.relations:
            if not relation.embed:
                continue
            documents: List[Dict[str, Any]] = [
                self._build(target, depth - 1, seen) for target in relation.targets
            ]
            if relation.is_to_many:
                embedded[relation.name] = documents
            else:
                embedded[relation.name] = documents[0] if documents else None
        return embedded

    @staticmethod
    def _link(href: str) -> Dict[str, str]:
        return HALLink(href=href).model_dump()
