from __future__ import annotations
from enum import Enum as PyEnum
from typing import Optional, List, Dict, Union, Iterable

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from utils.errors import MalformedGraph

SELF_REL = "self"

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class Cardinality(str, PyEnum):
    """Cardinality of a relationship"""
    TO_ONE = "to-one"       # zero or one target
    TO_MANY = "to-many"     # ordered, possibly empty, collection of targets


# -----------------------------------------------------------------------------
# Resource Graph Model
# -----------------------------------------------------------------------------
class Entity(BaseModel):
    """A domain object instance, the unit every hypermedia document is built from."""
    type: str = Field(
        ...,
        min_length=1,
        description="Resource kind of the entity (e.g., 'order', 'item')"
    )
    id: Union[str, int] = Field(
        ...,
        description="Identifier, unique within the entity type"
    )
    attributes: Dict[str, JsonValue] = Field(
        default_factory=dict,
        description="Ordered payload fields; values are restricted to JSON values"
    )
    relations: List[RelationDescriptor] = Field(
        default_factory=list,
        description="Ordered relationships; order drives link emission order"
    )

    model_config = ConfigDict(from_attributes=True)

    @property
    def key(self) -> tuple[str, str]:
        return (self.type, str(self.id))

    def add_relation(
        self,
        name: str,
        cardinality: Cardinality,
        targets: Iterable[Entity] = (),
        embed: bool = False,
    ) -> Entity:
        self.relations.append(
            RelationDescriptor(name=name, cardinality=cardinality, targets=list(targets), embed=embed)
        )
        return self

    def check_relations(self) -> None:
        """
        Raise MalformedGraph when the relations of this entity cannot be
        serialized under either convention.
        """
        seen: set[str] = set()
        for relation in self.relations:
            if relation.name == SELF_REL:
                raise MalformedGraph(
                    f"{self.type}/{self.id}: relation name '{SELF_REL}' is reserved"
                )
            if relation.name in seen:
                raise MalformedGraph(
                    f"{self.type}/{self.id}: duplicate relation '{relation.name}'"
                )
            seen.add(relation.name)

            if relation.cardinality is Cardinality.TO_ONE and len(relation.targets) > 1:
                raise MalformedGraph(
                    f"{self.type}/{self.id}: to-one relation '{relation.name}' "
                    f"has {len(relation.targets)} targets"
                )


class RelationDescriptor(BaseModel):
    """One relationship from a source entity to zero, one or many targets."""
    name: str = Field(
        ...,
        min_length=1,
        description="Relation name, unique among the source entity's relations"
    )
    cardinality: Cardinality = Field(
        ...,
        description="Whether the relation points at one target or a collection"
    )
    targets: List[Entity] = Field(
        default_factory=list,
        description="Related entities; at most one for to-one relations"
    )
    embed: bool = Field(
        False,
        description="Inline the targets' representations instead of linking only"
    )

    @classmethod
    def to_one(cls, name: str, target: Optional[Entity] = None, embed: bool = False) -> RelationDescriptor:
        return cls(
            name=name,
            cardinality=Cardinality.TO_ONE,
            targets=[target] if target is not None else [],
            embed=embed,
        )

    @classmethod
    def to_many(cls, name: str, targets: Iterable[Entity] = (), embed: bool = False) -> RelationDescriptor:
        return cls(name=name, cardinality=Cardinality.TO_MANY, targets=list(targets), embed=embed)

    @property
    def is_to_many(self) -> bool:
        return self.cardinality is Cardinality.TO_MANY


Entity.model_rebuild()
RelationDescriptor.model_rebuild()


class Representations:
    """
    Document-scoped record of the attributes each (type, id) pair was
    rendered with. Two occurrences of one pair must agree on their attributes.
    """

    def __init__(self):
        self._seen: Dict[tuple[str, str], Dict[str, JsonValue]] = {}
        self._walked: Dict[tuple[str, str], int] = {}

    def register(self, entity: Entity) -> bool:
        """Record `entity`; returns False when the pair was already represented."""
        known = self._seen.get(entity.key)
        if known is None:
            self._seen[entity.key] = entity.attributes
            return True
        if known != entity.attributes:
            raise MalformedGraph(
                f"{entity.type}/{entity.id} appears twice with different attributes"
            )
        return False

    def deepen(self, entity: Entity, depth: int) -> bool:
        """
        Record that `entity`'s embeds are followed for `depth` more hops.
        Returns False when an earlier walk already went at least that far.
        """
        if depth <= self._walked.get(entity.key, 0):
            return False
        self._walked[entity.key] = depth
        return True
