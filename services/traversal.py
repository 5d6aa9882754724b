from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from services.negotiation import Convention
from utils.errors import RelationNotFound, UnsupportedConvention

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

# Reserved HAL link names that are not relations of the resource
HAL_RESERVED_LINKS = ("self", "curies")
DEFAULT_FALLBACK_TEMPLATE = "/{type}/{id}"


# -----------------------------------------------------------------------------
# Document inspection
# -----------------------------------------------------------------------------
def detect_convention(document: Document) -> Convention:
    if "_links" in document:
        return Convention.HAL
    if "data" in document:
        return Convention.JSON_GRAPH
    raise UnsupportedConvention("unrecognized document shape")


def _relationships(document: Document) -> Dict[str, Any]:
    if "relationships" in document:
        return document["relationships"] or {}
    data = document.get("data")
    if isinstance(data, dict):
        return data.get("relationships") or {}
    return {}


def list_relations(document: Document, convention: Optional[Convention] = None) -> List[str]:
    """Relation names in the order the document lists them."""
    convention = convention or detect_convention(document)
    if convention is Convention.HAL:
        return [rel for rel in document.get("_links", {}) if rel not in HAL_RESERVED_LINKS]
    return list(_relationships(document))


def _href(link: Any) -> Optional[str]:
    # HAL allows an array of link objects per relation; JSON:API allows
    # either a string or a link object
    if isinstance(link, list):
        link = link[0] if link else None
    if isinstance(link, dict):
        return link.get("href")
    return link


def resolve_relation_url(
    document: Document,
    rel: str,
    convention: Optional[Convention] = None,
    fallback_template: str = DEFAULT_FALLBACK_TEMPLATE,
) -> Optional[str]:
    """
    URL to fetch for relation `rel`, or None when the document does not
    carry that relation.

    For relationship-graph documents without a "related" link the URL is
    derived from the first resource identifier using `fallback_template`.
    """
    convention = convention or detect_convention(document)

    if convention is Convention.HAL:
        return _href(document.get("_links", {}).get(rel))

    entry = _relationships(document).get(rel)
    if entry is None:
        return None

    related = _href((entry.get("links") or {}).get("related"))
    if related:
        return related

    data = entry.get("data")
    if isinstance(data, list):
        data = data[0] if data else None
    if not data:
        return None
    return fallback_template.format(type=data["type"], id=data["id"])


def self_url(document: Document, convention: Optional[Convention] = None) -> Optional[str]:
    convention = convention or detect_convention(document)
    if convention is Convention.HAL:
        return _href(document.get("_links", {}).get("self"))

    links = document.get("links")
    data = document.get("data")
    if not links and isinstance(data, dict):
        links = data.get("links")
    return _href((links or {}).get("self"))


def embedded(
    document: Document,
    rel: str,
    convention: Optional[Convention] = None,
) -> Union[Document, List[Document], None]:
    """
    Inlined representation(s) of relation `rel`: the "_embedded" entry for
    HAL, the matching "included" resources for relationship-graph documents.
    """
    convention = convention or detect_convention(document)
    if convention is Convention.HAL:
        return document.get("_embedded", {}).get(rel)

    entry = _relationships(document).get(rel)
    if entry is None:
        return None

    index = {(r["type"], r["id"]): r for r in document.get("included", [])}
    data = entry.get("data")
    if isinstance(data, list):
        return [index[(i["type"], i["id"])] for i in data if (i["type"], i["id"]) in index]
    if data is None:
        return None
    return index.get((data["type"], data["id"]))


# -----------------------------------------------------------------------------
# HTTP client
# -----------------------------------------------------------------------------
class HypermediaClient:
    """
    Generic client that navigates an API purely through the links found in
    the documents it receives.
    """

    def __init__(
        self,
        *,
        base_url: str,
        convention: Convention = Convention.HAL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base = base_url.rstrip("/")
        self._convention = convention
        self._timeout = timeout
        self._transport = transport

    async def get(self, url: str) -> Document:
        async with httpx.AsyncClient(
            base_url=self._base,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            r = await client.get(url, headers={"Accept": self._convention.media_type})
            r.raise_for_status()
            return r.json()

    async def follow(self, url: str, *rels: str) -> Document:
        """Fetch `url`, then follow each relation in turn."""
        document = await self.get(url)
        for rel in rels:
            next_url = resolve_relation_url(document, rel, convention=self._convention)
            if next_url is None:
                raise RelationNotFound(rel, url)
            logger.debug("Following '%s' from %s to %s", rel, url, next_url)
            url = next_url
            document = await self.get(url)
        return document
