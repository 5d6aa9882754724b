from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.hateoas import ResourceIdentifier
from models.resource import Entity, RelationDescriptor, Representations
from services.links import LinkResolver


class IncludedResources(Representations):
    """
    Document-scoped registry of (type, id) pairs already represented in a
    document. Keeps the included section free of duplicates and rejects two
    occurrences of one pair that disagree on their attributes.
    """

    def __init__(self):
        super().__init__()
        self.entries: List[Dict[str, Any]] = []

    def seed(self, entity: Entity, depth: int) -> None:
        """Register a primary resource; primary data is never repeated in included."""
        self.register(entity)
        self.deepen(entity, depth)

    def add(self, entity: Entity) -> bool:
        """Include `entity` once; returns False when it was already represented."""
        if not self.register(entity):
            return False
        self.entries.append(resource_object(entity))
        return True


def resource_identifier(entity: Entity) -> Dict[str, str]:
    return ResourceIdentifier(type=entity.type, id=str(entity.id)).model_dump()


def resource_object(entity: Entity) -> Dict[str, Any]:
    return {
        "type": entity.type,
        "id": str(entity.id),
        "attributes": dict(entity.attributes),
    }


class JSONGraphBuilder:
    """
    Serializes an entity graph into the relationship-graph convention:
    primary "data", a "relationships" entry per relation (related link plus
    resource identifiers) and a deduplicated "included" section holding the
    flattened representations of embedded targets.

    `depth` is the number of embedding hops followed when filling
    "included"; included resources never carry relationships themselves.
    """

    def __init__(self, resolver: LinkResolver):
        self.resolver = resolver

    def build(self, entity: Entity, depth: int = 1) -> Dict[str, Any]:
        entity.check_relations()

        included = IncludedResources()
        included.seed(entity, depth)

        document: Dict[str, Any] = {
            "data": resource_object(entity),
            "relationships": self._relationships(entity),
        }
        self._include(entity, depth, included)

        if included.entries:
            document["included"] = included.entries
        return document

    def build_collection(
        self,
        entities: Iterable[Entity],
        self_href: Optional[str] = None,
        rel: Optional[str] = None,
        depth: int = 1,
    ) -> Dict[str, Any]:
        """
        Build a document whose primary data is a list of resources. A single
        deduplication scope spans every primary resource. `rel` is accepted
        for interface parity with the HAL builder; the resource types already
        name the members.
        """
        entities = list(entities)
        included = IncludedResources()
        for entity in entities:
            entity.check_relations()
            included.seed(entity, depth)

        data = []
        for entity in entities:
            resource = resource_object(entity)
            resource["relationships"] = self._relationships(entity)
            data.append(resource)

        for entity in entities:
            self._include(entity, depth, included)

        document: Dict[str, Any] = {}
        if self_href is not None:
            document["links"] = {"self": self_href}
        document["data"] = data
        if included.entries:
            document["included"] = included.entries
        return document

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------
    def _relationships(self, entity: Entity) -> Dict[str, Any]:
        return {
            relation.name: {
                "links": {"related": self.resolver.resolve(entity.type, entity.id, relation.name)},
                "data": self._linkage(relation),
            }
            for relation in entity.relations
        }

    @staticmethod
    def _linkage(relation: RelationDescriptor) -> Optional[Any]:
        if relation.is_to_many:
            return [resource_identifier(target) for target in relation.targets]
        if not relation.targets:
            return None
        return resource_identifier(relation.targets[0])

    def _include(self, entity: Entity, depth: int, included: IncludedResources) -> None:
        if depth <= 0:
            return
        # A target reached again with more hops left is walked again
        for relation in entity.relations:
            if not relation.embed:
                continue
            for target in relation.targets:
                included.add(target)
                if depth > 1 and included.deepen(target, depth - 1):
                    target.check_relations()
                    self._include(target, depth - 1, included)
