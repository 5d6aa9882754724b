from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Union

from models.hateoas import ID_PLACEHOLDER, LinkTemplates
from utils.errors import UnresolvedRelation

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Template loading
# -----------------------------------------------------------------------------
def load_link_templates(path: Union[str, Path]) -> LinkTemplates:
    """
    Load the link-template table from a JSON file of the form
    {"order": {"self": "/orders/{id}", "items": "/orders/{id}/items"}}.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    templates = LinkTemplates(templates=data)
    logger.info(
        "Loaded link templates from %s: %s",
        path,
        {entity_type: sorted(rels) for entity_type, rels in templates.templates.items()},
    )
    return templates


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------
class LinkResolver:
    """Derives canonical URLs for entities and their relations."""

    def __init__(self, templates: LinkTemplates):
        self._templates = templates

    def resolve(self, entity_type: str, entity_id: Union[str, int], rel: str) -> str:
        pattern = self._templates.lookup(entity_type, rel)
        if pattern is None:
            raise UnresolvedRelation(entity_type, rel)
        return pattern.replace(ID_PLACEHOLDER, str(entity_id))

    def has(self, entity_type: str, rel: str) -> bool:
        return self._templates.lookup(entity_type, rel) is not None

    def relations(self, entity_type: str) -> List[str]:
        return list(self._templates.templates.get(entity_type, {}))
