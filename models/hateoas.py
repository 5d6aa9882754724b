from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ID_PLACEHOLDER = "{id}"


class HALLink(BaseModel):
    href: str           # resolved URL, relative to the API root


class ResourceIdentifier(BaseModel):
    type: str           # "order", "item"
    id: str             # always serialized as a string


class LinkTemplates(BaseModel):
    """
    Routing-template table mapping entity type -> relation name (or "self")
    -> URL pattern with a single {id} placeholder.

    Built once at startup and shared read-only by every request: both the
    outer table and each per-type mapping are read-only views over copies of
    the input.
    """
    templates: Mapping[str, Mapping[str, str]] = Field(
        default_factory=dict,
        validate_default=True,
        description="Entity type -> relation name or 'self' -> URL pattern"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("templates")
    @classmethod
    def _check_patterns(cls, value: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
        for entity_type, relations in value.items():
            for rel, pattern in relations.items():
                if pattern.count(ID_PLACEHOLDER) != 1:
                    raise ValueError(
                        f"Template for '{entity_type}.{rel}' must contain exactly one "
                        f"{ID_PLACEHOLDER} placeholder: {pattern!r}"
                    )
        return MappingProxyType(
            {entity_type: MappingProxyType(dict(relations)) for entity_type, relations in value.items()}
        )

    def lookup(self, entity_type: str, rel: str) -> Optional[str]:
        return self.templates.get(entity_type, {}).get(rel)
